"""Create files from provider templates.

This is the glue between providers and the template engine: gather the
templates offered for a directory, merge values, render the file name and
content, write the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from newfile.engine import TemplateError, render
from newfile.providers import FileTemplate, Provider, get_provider

from .config import NewfileConfig
from .errors import (
    InvalidFileNameError,
    NewfileError,
    OutputExistsError,
    TemplateNotFoundError,
)

log = logging.getLogger(__name__)


class RenderFailedError(NewfileError):
    """Raised when a file name or content template fails to render."""

    def __init__(self, what: str, error: TemplateError) -> None:
        self.error = error
        super().__init__(f"Error rendering {what}:\n{error}")


@dataclass
class CollectedOptions:
    """Templates offered for a directory, with the providers' shared values."""

    templates: list[FileTemplate] = field(default_factory=list)
    values: dict[str, Any] = field(default_factory=dict)

    def find(self, name: str) -> FileTemplate:
        """The template whose display name is `name` (case-insensitive)."""
        for template in self.templates:
            if template.display_name.lower() == name.lower():
                return template
        raise TemplateNotFoundError(name)


@dataclass
class CreatedFile:
    path: Path
    cursor_start_row: Optional[int] = None


def enabled_providers(config: NewfileConfig) -> list[Provider]:
    """Providers enabled by `config`, in order."""
    return [get_provider(name) for name in config.providers]


def collect_options(
    directory: Path, providers: Sequence[Provider]
) -> CollectedOptions:
    """Ask every provider what it offers for `directory`.

    Shared values are merged in provider order; later providers win.
    """
    collected = CollectedOptions()
    for provider in providers:
        options = provider.get_new_file_options(directory)
        if options is None:
            continue
        log.debug(
            "Provider %s offers %d template(s)", provider.name, len(options.templates)
        )
        collected.values.update(options.values)
        collected.templates.extend(options.templates)
    return collected


def build_values(
    file_name: str,
    shared_values: Mapping[str, Any],
    template: FileTemplate,
    extra_values: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Values for rendering: file_name < shared < template < extra."""
    values: dict[str, Any] = {"file_name": file_name}
    values.update(shared_values)
    values.update(template.values)
    values.update(extra_values or {})
    return values


def render_file(
    template: FileTemplate, values: Mapping[str, Any], config: NewfileConfig
) -> tuple[str, str]:
    """Render the file name and content of `template`.

    Raises:
        RenderFailedError: If either template fails to compile or evaluate.
    """
    try:
        file_name = render(template.file_name_template, values)
    except TemplateError as e:
        raise RenderFailedError("file name", e) from e

    try:
        content = render(
            template.content,
            values,
            indent=template.indent,
            variable_syntax=template.variable_syntax,
        )
    except TemplateError as e:
        raise RenderFailedError("content template", e) from e

    if config.final_newline and content and not content.endswith("\n"):
        content += "\n"
    return file_name, content


def create_file(
    directory: Path,
    template: FileTemplate,
    file_name: str,
    shared_values: Mapping[str, Any],
    config: NewfileConfig,
    extra_values: Optional[Mapping[str, Any]] = None,
    force: bool = False,
) -> CreatedFile:
    """Render `template` and write the result into `directory`.

    Raises:
        RenderFailedError: If rendering fails.
        InvalidFileNameError: If the rendered name is blank or names a
            directory.
        OutputExistsError: If the file exists and `force` is False.
    """
    values = build_values(file_name, shared_values, template, extra_values)
    rendered_name, content = render_file(template, values, config)

    if not rendered_name.strip():
        raise InvalidFileNameError(rendered_name, "the file name is empty")
    path = directory / rendered_name
    if path.is_dir():
        raise InvalidFileNameError(rendered_name, f"{path} is a directory")
    if path.exists() and not force:
        raise OutputExistsError(str(path))

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    log.info("Wrote %s", path)
    return CreatedFile(path=path, cursor_start_row=template.cursor_start_row)


def parse_assignments(items: Optional[Iterable[str]]) -> dict[str, str]:
    """Parse KEY=VALUE command line assignments."""
    values: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise NewfileError(f"Expected KEY=VALUE, got '{item}'", exit_code=2)
        values[key.strip()] = value
    return values
