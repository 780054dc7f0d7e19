from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from anime_quiz.core import config_templates
from anime_quiz.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)


def test_anime_quiz_template_round_trips_through_write(tmp_path: Path) -> None:
    template = config_templates.get_template("anime_quiz")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[quiz]" in contents
    assert "default_question_count = 8" in contents

    target = tmp_path / "config" / "anime_quiz.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError):
        template.write(target)

    assert template.write(target, overwrite=True) == target


def test_template_parses_as_valid_toml() -> None:
    data = tomllib.loads(config_templates.get_template("anime_quiz").read_text())

    assert data["quiz"]["default_question_count"] == 8
    assert data["catalog"]["image_prefix"] == "/assets/images"
    assert data["catalog"]["music_prefix"] == "/assets/musics"
    assert data["logging"]["level"] == "INFO"


def test_iter_templates_lists_anime_quiz() -> None:
    names = {template.name for template in config_templates.iter_templates()}
    assert names == {"anime_quiz"}


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)
