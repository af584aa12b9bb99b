"""newfile CLI Main Entry Point

newfile - create new files from project-aware templates.

Usage:
    newfile list [DIR]                       # Templates available in DIR
    newfile new [DIR] -t "C# class" -n Foo   # Create DIR/Foo.cs
    newfile new                              # Prompt for template and name
    newfile render FILE -s name=World        # Render a template file
    newfile compile FILE                     # Show the compiled program
    newfile init                             # Write a starter .newfile.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ._version import __version__
from .commands import (
    compile_command,
    init_command,
    list_command,
    new_command,
    render_command,
)
from .commands.utils import setup_logging

typer_app = typer.Typer(
    help="Create new files from project-aware text templates.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"newfile {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """newfile - create new files from project-aware text templates."""
    setup_logging(verbose)


@typer_app.command("list")
def list_cmd(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory the file would be created in (default: cwd)."
    ),
) -> None:
    """List the templates available for a directory."""
    list_command(directory)


@typer_app.command("new")
def new_cmd(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory to create the file in (default: cwd)."
    ),
    template: Optional[str] = typer.Option(
        None, "-t", "--template", help="Template name (prompted if omitted)."
    ),
    name: Optional[str] = typer.Option(
        None, "-n", "--name", help="Value of file_name (prompted if omitted)."
    ),
    assignments: Optional[List[str]] = typer.Option(
        None, "-s", "--set", help="Extra template value, as KEY=VALUE."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
    edit: bool = typer.Option(False, "-e", "--edit", help="Open the file in $EDITOR."),
) -> None:
    """Create a new file from a template.

    Examples:
        newfile new src/Models -t "C# class" -n Customer
        newfile new -t "Python module" -n utils -s imports=os,sys
    """
    new_command(
        directory=directory,
        template_name=template,
        file_name=name,
        assignments=assignments,
        force=force,
        edit=edit,
    )


@typer_app.command("render")
def render_cmd(
    file: Path = typer.Argument(..., help="Template file."),
    assignments: Optional[List[str]] = typer.Option(
        None, "-s", "--set", help="Template value, as KEY=VALUE."
    ),
    indent: Optional[int] = typer.Option(
        None, "--indent", min=0, help="Blanks prepended to every line."
    ),
    bracket: bool = typer.Option(
        False, "--bracket", help="Use «expr» placeholders instead of $(expr)."
    ),
    lines: bool = typer.Option(
        False, "--lines", help="Print the produced lines as a JSON array."
    ),
) -> None:
    """Render a template file to stdout."""
    render_command(file, assignments, indent=indent, bracket=bracket, as_lines=lines)


@typer_app.command("compile")
def compile_cmd(
    file: Path = typer.Argument(..., help="Template file."),
    indent: Optional[int] = typer.Option(
        None, "--indent", min=0, help="Blanks prepended to every line."
    ),
    bracket: bool = typer.Option(
        False, "--bracket", help="Use «expr» placeholders instead of $(expr)."
    ),
) -> None:
    """Print the compiled program of a template file."""
    compile_command(file, indent=indent, bracket=bracket)


@typer_app.command("init")
def init_cmd(
    directory: Optional[Path] = typer.Argument(None, help="Directory (default: cwd)."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
) -> None:
    """Write a starter .newfile.yaml."""
    init_command(directory, force=force)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
