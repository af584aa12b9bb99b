"""CLI commands"""

from .init import init_command
from .list import list_command
from .new import new_command
from .render import compile_command, render_command

__all__ = [
    "init_command",
    "list_command",
    "new_command",
    "render_command",
    "compile_command",
]
