"""Tests for .newfile.yaml handling."""

import pytest
import yaml

from newfile.engine import VariableSyntax
from newfile.lib.config import (
    CONFIG_FILE_NAME,
    NewfileConfig,
    TemplateConfig,
    find_config_file,
    load_config,
    load_project_config,
    save_config,
)
from newfile.lib.errors import ConfigError
from newfile.lib.init import (
    AlreadyInitializedError,
    check_already_initialized,
    create_config_file,
)


class TestNewfileConfig:
    def test_defaults(self):
        config = NewfileConfig()
        assert config.indent == 0
        assert config.variable_syntax == VariableSyntax.DEFAULT
        assert config.final_newline is True
        assert config.providers == ["csharp", "config"]
        assert config.templates == []

    def test_bracket_syntax(self):
        config = NewfileConfig.model_validate({"variable_syntax": "bracket"})
        assert config.variable_syntax == VariableSyntax.BRACKET

    def test_template_defaults(self):
        template = TemplateConfig(name="Note")
        assert template.file_name_template == "$(file_name)"
        assert template.content == ""
        assert template.cursor_start_row is None


class TestLoading:
    def test_find_config_in_parent(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("indent: 2\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / CONFIG_FILE_NAME).resolve()

    def test_find_config_missing(self, tmp_path):
        assert find_config_file(tmp_path) is None

    def test_load_project_config_defaults(self, tmp_path):
        assert load_project_config(tmp_path) == NewfileConfig()

    def test_load_config(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(
            """
indent: 4
providers: [config]
templates:
  - name: Script
    file_name_template: "$(file_name).sh"
    cursor_start_row: 2
"""
        )
        config = load_config(path)
        assert config.indent == 4
        assert config.providers == ["config"]
        assert config.templates[0].cursor_start_row == 2

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("")
        assert load_config(path) == NewfileConfig()

    @pytest.mark.parametrize(
        "content",
        [
            "indent: [unclosed",
            "- just\n- a list\n",
            "indent: -1\n",
            "variable_syntax: curly\n",
            "templates:\n  - content: no name\n",
        ],
    )
    def test_invalid_config(self, tmp_path, content):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / CONFIG_FILE_NAME)


class TestSaving:
    def test_only_set_fields_are_written(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        save_config(NewfileConfig(indent=2), path)
        assert yaml.safe_load(path.read_text()) == {"indent": 2}

    def test_save_then_load(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        config = NewfileConfig(
            variable_syntax=VariableSyntax.BRACKET,
            templates=[TemplateConfig(name="Note", content="«file_name»")],
        )
        save_config(config, path)
        assert load_config(path) == config


class TestInit:
    def test_create_config_file(self, tmp_path):
        path = create_config_file(cwd=tmp_path)
        assert path == tmp_path / CONFIG_FILE_NAME
        config = load_config(path)
        assert [t.name for t in config.templates] == ["Python module"]

    def test_already_initialized(self, tmp_path):
        create_config_file(cwd=tmp_path)
        with pytest.raises(AlreadyInitializedError):
            check_already_initialized(tmp_path / CONFIG_FILE_NAME)
