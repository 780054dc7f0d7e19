"""Configuration loader shared by the anime-quiz commands.

Options resolve with the precedence CLI > environment > TOML file >
built-in defaults. The TOML file lives at ``config/anime_quiz.toml`` inside
the workspace unless ``--config`` or ``ANIME_QUIZ_CONFIG`` points elsewhere.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from anime_quiz.catalog.models import IMAGE_PREFIX, MUSIC_PREFIX
from anime_quiz.core import config as core_config
from anime_quiz.core import workspace as workspace_mod
from anime_quiz.engine import (
    DEFAULT_QUESTION_COUNT,
    MAX_QUESTIONS,
    MIN_QUESTIONS,
)

CONFIG_FILENAME = "anime_quiz.toml"
CONFIG_ENV = "ANIME_QUIZ_CONFIG"
ENV_PREFIX = "ANIME_QUIZ_"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class AnimeQuizConfig:
    """Fully resolved configuration for one command run."""

    default_question_count: int
    seed: Optional[int]
    catalog_path: Path
    image_prefix: str
    music_prefix: str
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of env and file options."""

    catalog_path: Optional[Path] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: AnimeQuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve configuration for a run.

    A missing default config file is fine (defaults apply); a missing file
    that was explicitly requested is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        loaded_path = requested
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
    elif config_path is not None or _env_string(env_map, "CONFIG"):
        raise QuizConfigError(f"Config file not found: {requested}")

    quiz_section = table["quiz"]
    catalog_section = table["catalog"]

    config = AnimeQuizConfig(
        default_question_count=_require_question_count(
            quiz_section["default_question_count"]
        ),
        seed=_resolve_seed(
            overrides.seed,
            _env_string(env_map, "SEED"),
            quiz_section["seed"],
        ),
        catalog_path=_resolve_catalog_path(
            _pick_first(
                overrides.catalog_path,
                _env_path(env_map, "CATALOG_PATH"),
                _coerce_optional_path(catalog_section["path"]),
            ),
            layout=layout,
        ),
        image_prefix=_require_prefix(
            catalog_section["image_prefix"], field="catalog.image_prefix"
        ),
        music_prefix=_require_prefix(
            catalog_section["music_prefix"], field="catalog.music_prefix"
        ),
        log_level=_resolve_log_level(
            _pick_first(
                overrides.log_level,
                _env_string(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            )
        ),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "quiz": {
            "default_question_count": DEFAULT_QUESTION_COUNT,
            "seed": None,
        },
        "catalog": {
            "path": None,
            "image_prefix": IMAGE_PREFIX,
            "music_prefix": MUSIC_PREFIX,
        },
        "logging": {"level": "INFO"},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _require_question_count(value: Any) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not MIN_QUESTIONS <= value <= MAX_QUESTIONS
    ):
        raise QuizConfigError(
            "quiz.default_question_count must be an integer between "
            f"{MIN_QUESTIONS} and {MAX_QUESTIONS}."
        )
    return value


def _resolve_seed(
    override: Optional[int], env_value: Optional[str], file_value: Any
) -> Optional[int]:
    if override is not None:
        return override
    if env_value is not None:
        try:
            return int(env_value)
        except ValueError as exc:
            raise QuizConfigError(
                f"{ENV_PREFIX}SEED must be an integer, got '{env_value}'."
            ) from exc
    if file_value is None:
        return None
    if isinstance(file_value, bool) or not isinstance(file_value, int):
        raise QuizConfigError("quiz.seed must be an integer when set.")
    return file_value


def _coerce_optional_path(value: Any) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        return Path(raw) if raw else None
    raise QuizConfigError("catalog.path must be a string when provided.")


def _resolve_catalog_path(
    candidate: Optional[Path], *, layout: workspace_mod.WorkspaceLayout
) -> Path:
    if candidate is None:
        return layout.path_for("catalog")
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        return (layout.home / candidate).resolve()
    return candidate.resolve()


def _require_prefix(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _resolve_log_level(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise QuizConfigError(
            "logging.level must be one of DEBUG, INFO, WARNING, ERROR, "
            "CRITICAL."
        )
    return level


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw).expanduser() if raw is not None else None


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw.strip() or None


def _pick_first(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
