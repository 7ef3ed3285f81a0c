# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from dataclasses import dataclass, field
from pathlib import Path

import pytest

from acceff_lib.core.config import Config, _dict_to_dataclass


def test_dict_to_dataclass_nested_sections():
    @dataclass
    class Inner:
        level: str = "L0"

    @dataclass
    class Outer:
        inner: Inner = field(default_factory=Inner)
        name: str = "outer"

    result = _dict_to_dataclass(Outer, {"inner": {"level": "L2A"}})

    assert isinstance(result.inner, Inner)
    assert result.inner.level == "L2A"
    assert result.name == "outer"


def test_dict_to_dataclass_drops_unknown_keys():
    @dataclass
    class Section:
        value: int = 1

    result = _dict_to_dataclass(Section, {"value": 5, "unknown": "ignored"})

    assert result.value == 5
    assert not hasattr(result, "unknown")


def test_config_defaults():
    config = Config()

    assert config.exit_codes.default == 91
    assert config.exit_codes.unexpected_error == 99
    assert config.templates.variable_prefix == "VAR_"
    assert config.templates.comment_prefix == "//"
    assert config.submitter.ocdb_path == "raw://"
    assert config.submitter.trigger_level == "L2A"
    assert config.merger.split_level == 10
    assert config.commands.alien == "alien.py"
    assert config.binary_name == "acceff"


def test_config_load_from_toml(tmp_path):
    file = tmp_path / "config.toml"
    file.write_text(
        """
default_grid = "VGrid"

[submitter]
max_events_per_chunk = 600
compact_mode = 0

[merger]
split_level = 3
"""
    )

    config = Config.load(file)

    assert config.default_grid == "VGrid"
    assert config.submitter.max_events_per_chunk == 600
    assert config.submitter.compact_mode == 0
    assert config.merger.split_level == 3
    # untouched sections keep their defaults
    assert config.exit_codes.default == 91
    assert config.submitter.ratio == 1.0


def test_config_load_missing_file_uses_defaults(tmp_path):
    config = Config.load(tmp_path / "missing.toml")

    assert config == Config()


def test_config_load_invalid_file_raises(tmp_path):
    file = tmp_path / "config.toml"
    file.write_text("this is = = not toml")

    with pytest.raises(ValueError, match="Could not read acceff config"):
        Config.load(file)


def test_config_path_from_env_var(tmp_path, monkeypatch):
    file = tmp_path / "custom.toml"
    file.write_text("")
    monkeypatch.setenv("ACCEFF_CONFIG", str(file))

    assert Config._get_config_path() == file


def test_config_path_from_working_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("ACCEFF_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "acceff_config.toml").write_text("")

    assert Config._get_config_path() == Path.cwd() / "acceff_config.toml"
