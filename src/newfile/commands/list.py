"""List command - show the templates available for a directory"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.table import Table

from newfile.lib.config import load_project_config
from newfile.lib.create import collect_options, enabled_providers
from newfile.lib.errors import NewfileError, handle_error

from .utils import console, resolve_directory


def list_command(directory: Optional[Path] = None) -> None:
    """List the templates offered for `directory`."""
    try:
        target = resolve_directory(directory)
        config = load_project_config(target)
        options = collect_options(target, enabled_providers(config))
    except NewfileError as e:
        handle_error(e)

    if not options.templates:
        console.print("[yellow]No templates available here[/yellow]")
        return

    table = Table()
    table.add_column("#", style="dim")
    table.add_column("Template", style="cyan")
    table.add_column("File name")
    table.add_column("Asks for")

    for index, template in enumerate(options.templates, start=1):
        table.add_row(
            str(index),
            template.display_name,
            template.file_name_template,
            template.file_name_title,
        )

    console.print(table)
