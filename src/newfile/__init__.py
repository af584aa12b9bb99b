"""newfile - create new files from project-aware text templates.

    >>> from newfile import compile_template
    >>> compile_template("Hello $(whom)", environment={"whom": "Marco"}).evaluate()
    'Hello Marco'
"""

from newfile._version import __version__
from newfile.engine import (
    CompiledTemplate,
    Diagnostic,
    TemplateError,
    TemplateEvaluationError,
    TemplateSyntaxError,
    VariableSyntax,
    compile_template,
    decorate,
    render,
)

__all__ = [
    "__version__",
    # Engine
    "compile_template",
    "render",
    "decorate",
    "CompiledTemplate",
    "VariableSyntax",
    # Errors
    "Diagnostic",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateEvaluationError",
]
