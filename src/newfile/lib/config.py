"""Configuration management for newfile.

Settings live in `.newfile.yaml`, looked up in the target directory and its
parents:

- indent / variable_syntax: how the templates declared here are compiled
- final_newline: end written files with a newline
- providers: which providers offer templates, in order
- values: shared default values for every template
- templates: extra templates, served by the "config" provider
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from newfile.engine.spec import VariableSyntax

from .errors import ConfigError

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".newfile.yaml"


class TemplateConfig(BaseModel):
    """A file template declared in the configuration."""

    name: str = Field(description="Name shown when choosing a template")
    file_name_title: str = Field(
        default="File name", description="Prompt used to ask for the file name"
    )
    file_name_template: str = Field(
        default="$(file_name)", description="Template for the created file's name"
    )
    content: str = Field(default="", description="Template for the file content")
    cursor_start_row: int | None = Field(
        default=None, ge=1, description="Line to place the cursor on when editing"
    )
    values: dict[str, Any] = Field(
        default_factory=dict, description="Default values for this template"
    )


class NewfileConfig(BaseModel):
    """Main .newfile.yaml configuration."""

    indent: int = Field(
        default=0, ge=0, description="Indent for the templates declared here"
    )
    variable_syntax: VariableSyntax = Field(
        default=VariableSyntax.DEFAULT, description="'default' or 'bracket'"
    )
    final_newline: bool = Field(
        default=True, description="Terminate written files with a newline"
    )
    providers: list[str] = Field(
        default_factory=lambda: ["csharp", "config"],
        description="Enabled providers, in order",
    )
    values: dict[str, Any] = Field(
        default_factory=dict, description="Values shared by all templates"
    )
    templates: list[TemplateConfig] = Field(
        default_factory=list, description="Templates served by the config provider"
    )


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find .newfile.yaml in `start` (default: cwd) or its parents."""
    start = (start or Path.cwd()).resolve()
    for parent in [start] + list(start.parents):
        candidate = parent / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> NewfileConfig:
    """Load and validate a config file.

    Raises:
        ConfigError: If the file is missing, is not YAML, or does not match
            the schema.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        return NewfileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e


def load_project_config(directory: Optional[Path] = None) -> NewfileConfig:
    """Load the config that applies to `directory`, or defaults if none."""
    path = find_config_file(directory)
    if path is None:
        log.debug("No %s found, using defaults", CONFIG_FILE_NAME)
        return NewfileConfig()
    log.info("Using config %s", path)
    return load_config(path)


def save_config(config: NewfileConfig, path: Path) -> None:
    """Save config to `path`, writing only explicitly set fields."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_unset=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
