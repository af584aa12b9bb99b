"""New command - create a file from a template"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional

import typer

from newfile.lib.config import load_project_config
from newfile.lib.create import (
    collect_options,
    create_file,
    enabled_providers,
    parse_assignments,
)
from newfile.lib.errors import NewfileError, handle_error
from newfile.providers import FileTemplate

from .utils import console, resolve_directory

log = logging.getLogger(__name__)


def choose_template(templates: list[FileTemplate]) -> FileTemplate:
    """Prompt for one of `templates`."""
    for index, template in enumerate(templates, start=1):
        console.print(f"  [dim]{index}.[/dim] {template.display_name}")

    while True:
        choice = typer.prompt("Select a template", type=int)
        if 1 <= choice <= len(templates):
            return templates[choice - 1]
        console.print(f"[red]Choose a number between 1 and {len(templates)}[/red]")


def open_in_editor(path: Path, row: Optional[int] = None) -> None:
    """Open `path` in $VISUAL / $EDITOR, at `row` when given."""
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if not editor:
        log.info("No $EDITOR set, opening %s with the default application", path)
        typer.launch(str(path))
        return

    cmd = shlex.split(editor)
    if row is not None:
        cmd.append(f"+{row}")
    cmd.append(str(path))
    log.debug("Running %s", cmd)
    subprocess.run(cmd, check=False)


def new_command(
    directory: Optional[Path] = None,
    template_name: Optional[str] = None,
    file_name: Optional[str] = None,
    assignments: Optional[list[str]] = None,
    force: bool = False,
    edit: bool = False,
) -> None:
    """Create a new file in `directory` from one of the offered templates."""
    try:
        target = resolve_directory(directory)
        config = load_project_config(target)
        options = collect_options(target, enabled_providers(config))
        extra_values = parse_assignments(assignments)

        if not options.templates:
            raise NewfileError(f"No templates available in {target}")

        if template_name is not None:
            template = options.find(template_name)
        else:
            template = choose_template(options.templates)

        if file_name is None:
            file_name = typer.prompt(template.file_name_title)

        created = create_file(
            target,
            template,
            file_name,
            options.values,
            config,
            extra_values=extra_values,
            force=force,
        )
    except NewfileError as e:
        handle_error(e)

    console.print(f"[green]Created[/green] {created.path}")

    if edit:
        open_in_editor(created.path, created.cursor_start_row)
