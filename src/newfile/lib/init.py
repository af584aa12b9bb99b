"""Init helpers for newfile."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import CONFIG_FILE_NAME, NewfileConfig, TemplateConfig, save_config
from .errors import NewfileError

STARTER_TEMPLATE = TemplateConfig(
    name="Python module",
    file_name_title="Module name",
    file_name_template="$(file_name).py",
    cursor_start_row=4,
    content='''\
"""$(file_name) module."""

@for name in imports.split(",")
import $(name.strip())
@end


''',
    values={"imports": "logging"},
)


class AlreadyInitializedError(NewfileError):
    """Raised when trying to initialize an already initialized directory."""

    def __init__(self) -> None:
        super().__init__(f"{CONFIG_FILE_NAME} already exists in this directory", exit_code=1)


def check_already_initialized(config_path: Path) -> None:
    """Raise AlreadyInitializedError if config exists at `config_path`."""
    if config_path.exists():
        raise AlreadyInitializedError()


def create_config_file(
    cwd: Optional[Path] = None, config_path: Optional[Path] = None
) -> Path:
    """Create .newfile.yaml with a starter template. Returns the created path."""
    cwd = cwd or Path.cwd()
    if config_path is None:
        config_path = cwd / CONFIG_FILE_NAME

    config = NewfileConfig(templates=[STARTER_TEMPLATE])
    save_config(config, config_path)
    return config_path
