from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure src/ is importable when the package is not installed
SRC = str(TESTS_DIR.parent / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from fixtures import CatalogBuilder, populated_catalog  # noqa: E402

_ENV_KEYS = (
    "ANIME_QUIZ_DATA_HOME",
    "ANIME_QUIZ_CONFIG",
    "ANIME_QUIZ_CATALOG_PATH",
    "ANIME_QUIZ_SEED",
    "ANIME_QUIZ_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Point the workspace at a per-test directory and clear overrides."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ANIME_QUIZ_DATA_HOME", str(tmp_path / "workspace"))


@pytest.fixture
def catalog_builder() -> CatalogBuilder:
    return CatalogBuilder()


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """A populated catalog written as JSONL tables (10 per category)."""

    return populated_catalog().write(tmp_path / "catalog")
