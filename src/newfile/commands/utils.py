"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the newfile CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows config and written files
    - Debug (NEWFILE_DEBUG=1): DEBUG level - shows everything
    """
    debug = bool(os.environ.get("NEWFILE_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("newfile")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def resolve_directory(directory: Optional[Path]) -> Path:
    """Target directory for new files (default: cwd)."""
    return (directory or Path.cwd()).resolve()
