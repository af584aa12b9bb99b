"""Tests for providers."""

import pytest

from newfile import VariableSyntax, render
from newfile.lib.errors import UnknownProviderError
from newfile.providers import (
    ConfigProvider,
    CSharpProvider,
    get_provider,
    list_builtin_providers,
)
from newfile.providers.csharp import find_csproj_file, get_root_namespace


class TestCSharpProvider:
    def test_find_csproj_walks_up(self, csharp_project):
        found = find_csproj_file(csharp_project / "Models" / "Orders")
        assert found is not None
        assert found.directory == csharp_project.resolve()
        assert found.file.name == "Shop.csproj"

    def test_no_project(self, tmp_path):
        assert CSharpProvider().get_new_file_options(tmp_path) is None

    def test_namespace_from_root_namespace_and_path(self, csharp_project):
        options = CSharpProvider().get_new_file_options(csharp_project / "Models" / "Orders")
        assert options is not None
        assert options.values == {"cs_namespace": "Acme.Shop.Models.Orders"}

    def test_namespace_in_project_directory(self, csharp_project):
        options = CSharpProvider().get_new_file_options(csharp_project)
        assert options.values["cs_namespace"] == "Acme.Shop"

    def test_namespace_falls_back_to_project_file_name(self, tmp_path):
        (tmp_path / "Billing.csproj").write_text("<Project></Project>")
        (tmp_path / "Api").mkdir()
        options = CSharpProvider().get_new_file_options(tmp_path / "Api")
        assert options.values["cs_namespace"] == "Billing.Api"

    def test_root_namespace_parsing(self):
        assert get_root_namespace("<RootNamespace>A.B</RootNamespace>") == "A.B"
        assert get_root_namespace("<RootNamespace></RootNamespace>") is None
        assert get_root_namespace("<Project/>") is None

    def test_templates_render(self, csharp_project):
        options = CSharpProvider().get_new_file_options(csharp_project / "Models")
        names = [t.display_name for t in options.templates]
        assert names == ["C# class", "C# interface"]

        interface = options.templates[1]
        values = {"file_name": "Repository", **options.values}
        assert render(interface.file_name_template, values) == "IRepository.cs"
        content = render(interface.content, values)
        assert content.splitlines()[0] == "namespace Acme.Shop.Models;"
        assert "public interface IRepository" in content
        assert interface.cursor_start_row == 5
        assert interface.indent == 0
        assert interface.variable_syntax == VariableSyntax.DEFAULT


class TestConfigProvider:
    def test_no_config(self, tmp_path):
        assert ConfigProvider().get_new_file_options(tmp_path) is None

    def test_templates_from_config(self, tmp_path):
        (tmp_path / ".newfile.yaml").write_text(
            """
values:
  author: Jane
templates:
  - name: Note
    file_name_template: "$(file_name).md"
    content: "# $(file_name)"
    values:
      tags: [a]
"""
        )
        sub = tmp_path / "docs"
        sub.mkdir()

        options = ConfigProvider().get_new_file_options(sub)
        assert options.values == {"author": "Jane"}
        (template,) = options.templates
        assert template.display_name == "Note"
        assert template.file_name_title == "File name"
        assert template.values == {"tags": ["a"]}

    def test_templates_take_project_syntax_and_indent(self, tmp_path):
        (tmp_path / ".newfile.yaml").write_text(
            "indent: 3\nvariable_syntax: bracket\ntemplates:\n  - name: Note\n"
        )
        (template,) = ConfigProvider().get_new_file_options(tmp_path).templates
        assert template.indent == 3
        assert template.variable_syntax == VariableSyntax.BRACKET


class TestRegistry:
    def test_builtin_providers(self):
        assert list_builtin_providers() == ["csharp", "config"]
        assert get_provider("csharp").name == "csharp"

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError):
            get_provider("cobol")
