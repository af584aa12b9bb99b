"""Template errors carrying line-annotated diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from newfile.lib.errors import NewfileError


@dataclass(frozen=True)
class Diagnostic:
    """A message tied to a template line.

    `line` is 1-based and -1 when the position is unknown. `source` is the
    verbatim text of that template line, kept for human context.
    """

    line: int
    message: str
    source: Optional[str] = None

    @property
    def located(self) -> bool:
        return self.line != -1

    def location(self) -> str:
        return f"at line {self.line}:  >>> {self.source} <<<"


class RenderError(Exception):
    """Raised by the engine itself while running a template.

    Its message is reported verbatim, unlike arbitrary exceptions raised by
    user expressions, which are prefixed with their type name.
    """


class TemplateError(NewfileError):
    """Base class for compile and evaluation failures."""

    def __init__(self, lines: Sequence[str], diagnostics: Sequence[Diagnostic]) -> None:
        self.lines: List[str] = list(lines)
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        super().__init__("\n".join(self.lines))


class TemplateSyntaxError(TemplateError):
    """The template could not be compiled."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        lines = [f"Syntax error in the template: {diagnostic.message}"]
        if diagnostic.located:
            lines.append(f"\t{diagnostic.location()}")
        super().__init__(lines, [diagnostic])

    @property
    def line(self) -> int:
        return self.diagnostic.line


class TemplateEvaluationError(TemplateError):
    """Running a compiled template failed.

    `cause` is the primary diagnostic; `trace` lists the failing instruction
    and its enclosing blocks, innermost first.
    """

    def __init__(self, cause: Diagnostic, trace: Sequence[Diagnostic]) -> None:
        self.cause = cause
        self.trace: List[Diagnostic] = [d for d in trace if d.located]

        lines = [f"Template evaluation failed: {cause.message}"]
        if cause.located:
            lines.append(f"\t{cause.location()}")
        if self.trace:
            lines.append("Possible stacktrace:")
            for frame in self.trace:
                lines.append(f"\t{frame.message} - {frame.location()}")
        super().__init__(lines, [cause, *self.trace])

    @property
    def line(self) -> int:
        return self.cause.line
