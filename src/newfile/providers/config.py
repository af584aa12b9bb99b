"""config - templates declared in .newfile.yaml."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from newfile.lib.config import load_project_config

from .base import FileTemplate, NewFileOptions, Provider


class ConfigProvider(Provider):
    """Offers the templates and values listed in the project configuration."""

    @property
    def name(self) -> str:
        return "config"

    def get_new_file_options(self, directory: Path) -> Optional[NewFileOptions]:
        config = load_project_config(directory)
        if not config.templates and not config.values:
            return None

        return NewFileOptions(
            values=dict(config.values),
            templates=[
                FileTemplate(
                    display_name=t.name,
                    file_name_title=t.file_name_title,
                    file_name_template=t.file_name_template,
                    content=t.content,
                    cursor_start_row=t.cursor_start_row,
                    values=dict(t.values),
                    indent=config.indent,
                    variable_syntax=config.variable_syntax,
                )
                for t in config.templates
            ],
        )
