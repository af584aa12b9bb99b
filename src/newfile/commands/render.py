"""Render and compile commands - work on a single template file"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from newfile.engine import CompiledTemplate, VariableSyntax, compile_template
from newfile.lib.config import load_project_config
from newfile.lib.create import parse_assignments
from newfile.lib.errors import NewfileError, handle_error


def _compile_file(
    file: Path,
    indent: Optional[int],
    bracket: bool,
    assignments: Optional[list[str]] = None,
) -> CompiledTemplate:
    if not file.is_file():
        raise NewfileError(f"File not found: {file}")

    config = load_project_config(file.parent)
    values = dict(config.values)
    values.update(parse_assignments(assignments))

    syntax = VariableSyntax.BRACKET if bracket else config.variable_syntax
    return compile_template(
        file.read_text(encoding="utf-8"),
        indent=config.indent if indent is None else indent,
        variable_syntax=syntax,
        environment=values,
    )


def render_command(
    file: Path,
    assignments: Optional[list[str]] = None,
    indent: Optional[int] = None,
    bracket: bool = False,
    as_lines: bool = False,
) -> None:
    """Render a template file to stdout."""
    try:
        compiled = _compile_file(file, indent, bracket, assignments)
        result = compiled.evaluate(return_lines=as_lines)
    except NewfileError as e:
        handle_error(e)

    if as_lines:
        typer.echo(json.dumps(result, indent=2))
    else:
        typer.echo(result)


def compile_command(
    file: Path, indent: Optional[int] = None, bracket: bool = False
) -> None:
    """Print the program listing of a template file."""
    try:
        compiled = _compile_file(file, indent, bracket)
    except NewfileError as e:
        handle_error(e)

    typer.echo(compiled.listing())
