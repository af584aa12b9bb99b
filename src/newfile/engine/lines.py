"""Line helpers: splitting template text, decorating and inserting line blocks."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Union

from newfile.engine.errors import RenderError
from newfile.engine.expressions import is_undefined

LineSource = Union[Iterable[str], Callable[[], Iterable[str]]]


def split_lines(text: str) -> List[str]:
    """Split template text into lines.

    A single trailing newline does not start a new line, so "a\\nb\\n" and
    "a\\nb" both give two lines, and "" gives one empty line.
    """
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def _open(lines: LineSource) -> Iterable[str]:
    # Iterator factories (e.g. a generator function) are called on each pass
    return lines() if callable(lines) else lines


class LineDecorator:
    """Lazily wraps every non-empty line as prefix + line + suffix.

    Empty lines pass through untouched, so decorating never turns blank
    lines into visible content. Iterating again restarts the underlying
    iterable, which only works if that iterable is restartable.

    Example:
        >>> list(LineDecorator(["", "b", ""], "> "))
        ['', '> b', '']
    """

    def __init__(self, lines: LineSource, prefix: str = "", suffix: str = "") -> None:
        self.lines = lines
        self.prefix = prefix or ""
        self.suffix = suffix or ""

    def __iter__(self) -> Iterator[str]:
        for line in _open(self.lines):
            if line == "":
                yield ""
            else:
                yield f"{self.prefix}{line}{self.suffix}"

    def __repr__(self) -> str:
        return f"LineDecorator(prefix={self.prefix!r}, suffix={self.suffix!r})"


def decorate(lines: LineSource, prefix: str = "", suffix: str = "") -> LineDecorator:
    """Add an optional prefix and suffix to each non-empty line of `lines`."""
    return LineDecorator(lines, prefix, suffix)


def insert_lines(buffer: List[str], lines: Any, indent: str, what: str) -> None:
    """Append every line of `lines` to `buffer`, prefixed with `indent`.

    Empty lines are appended as empty strings, without indentation.

    Args:
        buffer: Output buffer to extend.
        lines: A sequence of strings, or a callable returning one.
        indent: Prefix for each non-empty line.
        what: How to name `lines` in error messages (e.g. "Variable 'items'").

    Raises:
        RenderError: If `lines` is undefined or not a sequence of strings.
    """
    if is_undefined(lines):
        raise RenderError(f"{what} is undefined in the current environment")
    if callable(lines):
        lines = lines()
    if isinstance(lines, (str, bytes)):
        raise RenderError(f"{what} must be a sequence of strings, not a single string")
    try:
        iterator = iter(lines)
    except TypeError:
        raise RenderError(
            f"{what} is not a sequence of strings (got {type(lines).__name__})"
        ) from None

    for index, line in enumerate(iterator):
        if not isinstance(line, str):
            raise RenderError(
                f"element {index} of {what} is not a string (got {type(line).__name__})"
            )
        buffer.append(f"{indent}{line}" if line else "")
