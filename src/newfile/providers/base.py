"""Provider base class and the records providers hand out."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from newfile.engine.spec import VariableSyntax


@dataclass
class FileTemplate:
    """A kind of file that can be created.

    `file_name_template` and `content` are newfile templates; both are
    rendered with the same values, which always include `file_name`.
    `indent` and `variable_syntax` apply to `content` only; the file name
    always uses the default `$(expr)` syntax.
    """

    display_name: str
    file_name_title: str
    file_name_template: str
    content: str
    cursor_start_row: Optional[int] = None
    values: dict[str, Any] = field(default_factory=dict)
    indent: int = 0
    variable_syntax: VariableSyntax = VariableSyntax.DEFAULT


@dataclass
class NewFileOptions:
    """What a provider offers for a directory."""

    values: dict[str, Any] = field(default_factory=dict)
    templates: list[FileTemplate] = field(default_factory=list)


class Provider(ABC):
    """Base class for providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'csharp')."""
        ...

    @abstractmethod
    def get_new_file_options(self, directory: Path) -> Optional[NewFileOptions]:
        """Templates and shared values for files created in `directory`.

        Returns None when the provider does not apply there.
        """
        ...
