"""Providers for newfile.

A provider inspects the directory a file is created in and offers file
templates plus shared values (e.g. the C# namespace of that directory).

Built-in providers:
- csharp: C# class/interface inside a .csproj project
- config: templates declared in .newfile.yaml
"""

from __future__ import annotations

from newfile.lib.errors import UnknownProviderError

from .base import FileTemplate, NewFileOptions, Provider
from .config import ConfigProvider
from .csharp import CSharpProvider

# Provider registry
_BUILTIN_PROVIDERS: dict[str, Provider] = {
    "csharp": CSharpProvider(),
    "config": ConfigProvider(),
}


def get_provider(name: str) -> Provider:
    """Get a provider by name (e.g., 'csharp')."""
    if name in _BUILTIN_PROVIDERS:
        return _BUILTIN_PROVIDERS[name]
    raise UnknownProviderError(name)


def list_builtin_providers() -> list[str]:
    """List all built-in provider names."""
    return list(_BUILTIN_PROVIDERS.keys())


__all__ = [
    "Provider",
    "FileTemplate",
    "NewFileOptions",
    "CSharpProvider",
    "ConfigProvider",
    "get_provider",
    "list_builtin_providers",
]
