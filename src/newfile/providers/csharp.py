"""csharp - C# classes and interfaces, namespaced after the project layout."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import NamedTuple, Optional

from newfile.lib.errors import ProviderError

from .base import FileTemplate, NewFileOptions, Provider

log = logging.getLogger(__name__)

ROOT_NAMESPACE = re.compile(r"<RootNamespace>(.*?)</RootNamespace>", re.DOTALL)

CLASS_TEMPLATE = """\
namespace $(cs_namespace);

public class $(file_name)
{

}
"""

INTERFACE_TEMPLATE = """\
namespace $(cs_namespace);

public interface I$(file_name)
{

}
"""


class CsProject(NamedTuple):
    directory: Path
    file: Path


def find_csproj_file(start_dir: Path) -> Optional[CsProject]:
    """Find the closest directory, from `start_dir` up, holding a .csproj."""
    start_dir = start_dir.resolve()
    for parent in [start_dir] + list(start_dir.parents):
        csprojs = sorted(parent.glob("*.csproj"))
        if csprojs:
            return CsProject(directory=parent, file=csprojs[0])
    return None


def get_root_namespace(xml_content: str) -> Optional[str]:
    """The <RootNamespace> declared in a project file, if any."""
    match = ROOT_NAMESPACE.search(xml_content)
    if match is None:
        return None
    return match.group(1).strip() or None


def get_namespace(project: CsProject, directory: Path) -> str:
    """Namespace for files in `directory`: root namespace + relative path."""
    try:
        content = project.file.read_text(encoding="utf-8")
    except OSError as e:
        raise ProviderError(f"Could not open file: {project.file}: {e}") from e

    root_namespace = get_root_namespace(content) or project.file.stem
    relative = directory.resolve().relative_to(project.directory)
    return ".".join([root_namespace, *relative.parts])


class CSharpProvider(Provider):
    """Offers C# class and interface templates inside .csproj projects."""

    @property
    def name(self) -> str:
        return "csharp"

    def get_new_file_options(self, directory: Path) -> Optional[NewFileOptions]:
        project = find_csproj_file(directory)
        if project is None:
            log.debug("No .csproj file found above %s", directory)
            return None

        namespace = get_namespace(project, directory)
        log.debug("C# namespace for %s is %s", directory, namespace)

        return NewFileOptions(
            values={"cs_namespace": namespace},
            templates=[
                FileTemplate(
                    display_name="C# class",
                    file_name_title="Class name",
                    file_name_template="$(file_name).cs",
                    content=CLASS_TEMPLATE,
                    cursor_start_row=5,
                ),
                FileTemplate(
                    display_name="C# interface",
                    file_name_title="Interface name",
                    file_name_template="I$(file_name).cs",
                    content=INTERFACE_TEMPLATE,
                    cursor_start_row=5,
                ),
            ],
        )
