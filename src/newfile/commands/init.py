"""Init command - write a starter .newfile.yaml"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from newfile.lib.config import CONFIG_FILE_NAME
from newfile.lib.errors import NewfileError, handle_error
from newfile.lib.init import check_already_initialized, create_config_file

from .utils import resolve_directory


def init_command(directory: Optional[Path] = None, force: bool = False) -> None:
    """Create .newfile.yaml in `directory`."""
    try:
        target = resolve_directory(directory)
        config_path = target / CONFIG_FILE_NAME
        if not force:
            check_already_initialized(config_path)
        create_config_file(cwd=target, config_path=config_path)
    except NewfileError as e:
        handle_error(e)

    typer.echo(f"Wrote {config_path}")
