from __future__ import annotations

import pytest

from anime_quiz.core import config as core_config


def test_load_toml_reads_tables(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text('[quiz]\nseed = 4\n', encoding="utf-8")

    assert core_config.load_toml(path) == {"quiz": {"seed": 4}}


def test_load_toml_missing_file(tmp_path):
    with pytest.raises(core_config.TomlConfigError, match="not found"):
        core_config.load_toml(tmp_path / "absent.toml")


def test_load_toml_syntax_error(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[quiz\n", encoding="utf-8")

    with pytest.raises(core_config.TomlConfigError, match="parse"):
        core_config.load_toml(path)


def test_merge_defaults_overrides_nested_values():
    base = {"quiz": {"seed": None, "default_question_count": 8}}

    core_config.merge_defaults(base, {"quiz": {"seed": 3}})

    assert base == {"quiz": {"seed": 3, "default_question_count": 8}}


def test_merge_defaults_rejects_unknown_keys():
    base = {"quiz": {"seed": None}}

    with pytest.raises(core_config.TomlConfigError, match="quiz.colour"):
        core_config.merge_defaults(base, {"quiz": {"colour": "red"}})


def test_merge_defaults_requires_tables_for_sections():
    base = {"logging": {"level": "INFO"}}

    with pytest.raises(core_config.TomlConfigError, match="Expected table"):
        core_config.merge_defaults(base, {"logging": "DEBUG"})


def test_write_toml_template_respects_overwrite(tmp_path):
    target = tmp_path / "nested" / "out.toml"

    core_config.write_toml_template(target, template="a = 1\n")
    with pytest.raises(core_config.TomlConfigError):
        core_config.write_toml_template(target, template="a = 2\n")
    core_config.write_toml_template(target, template="a = 2\n", overwrite=True)

    assert target.read_text(encoding="utf-8") == "a = 2\n"
