"""Shared error handling for newfile."""

import sys
from typing import NoReturn

import typer


class NewfileError(Exception):
    """Base exception for newfile operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigError(NewfileError):
    """Raised when .newfile.yaml cannot be read or validated."""


class ProviderError(NewfileError):
    """Raised when a provider fails to inspect a project."""


class UnknownProviderError(NewfileError):
    """Raised when the configuration names a provider that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown provider: {name}", exit_code=2)


class TemplateNotFoundError(NewfileError):
    """Raised when no offered template matches the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No template named '{name}' is available here", exit_code=2)


class InvalidFileNameError(NewfileError):
    """Raised when a rendered file name cannot be used as a file."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Invalid file name '{name}': {reason}")


class OutputExistsError(NewfileError):
    """Raised when the file to create already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File already exists: {path} (use --force to overwrite)")


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on newfile errors."""
    if isinstance(error, NewfileError):
        exit_with_error(error.message, error.exit_code)
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
