"""newfile.engine - Template compiler and evaluator.

Templates are plain text with `$(expr)` placeholders, `${name}` line-block
insertions and `@` statement lines; see newfile.engine.compiler.
"""

from newfile.engine.compiler import Compiler, compile_template, render
from newfile.engine.errors import (
    Diagnostic,
    TemplateError,
    TemplateEvaluationError,
    TemplateSyntaxError,
)
from newfile.engine.evaluator import BUILTINS, Evaluator
from newfile.engine.lines import LineDecorator, decorate
from newfile.engine.spec import VariableSyntax
from newfile.engine.template import CompiledTemplate

__all__ = [
    "Compiler",
    "compile_template",
    "render",
    "CompiledTemplate",
    "Evaluator",
    "BUILTINS",
    "VariableSyntax",
    "decorate",
    "LineDecorator",
    "Diagnostic",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateEvaluationError",
]
