"""Jinja2 expressions for placeholders and statement lines.

Every `$(...)` placeholder and every expression inside an `@` statement is a
Jinja2 expression: names, attribute and item access, calls, filters,
`~` concatenation and tests such as `is defined` all work. Undefined names
evaluate to a `StrictUndefined`, so any use other than the engine's own
"is this defined" check fails loudly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Mapping

from jinja2 import Environment, StrictUndefined, Undefined
from jinja2 import TemplateSyntaxError as JinjaSyntaxError


class ExpressionSyntaxError(ValueError):
    """Raised when an expression cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"invalid expression '{source}': {reason}")


@lru_cache(maxsize=1)
def get_expression_env() -> Environment:
    """Create the Jinja2 Environment used to compile expressions.

    Returns:
        Configured Jinja2 Environment (shared, never mutated after creation).
    """
    return Environment(undefined=StrictUndefined, autoescape=False)


@dataclass(frozen=True)
class Expression:
    """A compiled expression and the text it was compiled from."""

    source: str
    _compiled: Callable[..., Any] = field(repr=False, compare=False)

    def evaluate(self, scope: Mapping[str, Any]) -> Any:
        return self._compiled(scope)

    def __str__(self) -> str:
        return self.source


def compile_expression(source: str) -> Expression:
    """Compile `source` into an Expression.

    Raises:
        ExpressionSyntaxError: If `source` is not a valid expression.
    """
    try:
        compiled = get_expression_env().compile_expression(
            source, undefined_to_none=False
        )
    except JinjaSyntaxError as e:
        raise ExpressionSyntaxError(source, e.message or str(e)) from e
    return Expression(source=source, _compiled=compiled)


def is_undefined(value: Any) -> bool:
    """True for values a template must not render: None and Jinja undefineds."""
    return value is None or isinstance(value, Undefined)
