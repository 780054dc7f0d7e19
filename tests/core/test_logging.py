from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from anime_quiz.catalog import Category
from anime_quiz.core import logging as core_logging
from anime_quiz.engine import QuizStatus


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _records(path: Path) -> list[dict]:
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    return [json.loads(line) for line in lines]


def test_configure_logger_writes_json_lines(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "anime_quiz.test_json",
        log_dir=tmp_path / "logs",
        level="INFO",
    )

    logger.debug("hidden")
    logger.info(
        "Quiz generation finished",
        extra={
            "status": QuizStatus.REJECTED,
            "allocation": {Category.ANIME_IMAGE: 3},
            "messages": ("too many",),
            "catalog": tmp_path,
        },
    )
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("failed", extra={"helper": object()})
    for handler in logger.handlers:
        handler.flush()

    assert log_path.name == "test_json.log"
    first, second = _records(log_path)
    assert first["message"] == "Quiz generation finished"
    assert first["level"] == "INFO"
    assert first["extra"] == {
        "status": "rejected",
        "allocation": {"anime_image": 3},
        "messages": ["too many"],
        "catalog": str(tmp_path),
    }
    assert "ValueError: boom" in second["exception"]
    assert second["extra"]["helper"].startswith("<object")

    _close(logger)


def test_configure_logger_verbose_toggles_console_handler(tmp_path):
    name = "anime_quiz.test_console"

    def console_handlers(logger):
        return [
            h
            for h in logger.handlers
            if getattr(h, "_anime_quiz_console", False)
        ]

    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True
    )
    core_logging.configure_logger(name, log_dir=tmp_path, verbose=True)
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(name, log_dir=tmp_path, verbose=False)
    assert not console_handlers(logger)

    _close(logger)


def test_configure_logger_moves_file_with_log_dir(tmp_path):
    name = "anime_quiz.test_move"
    logger, first_path = core_logging.configure_logger(
        name, log_dir=tmp_path / "one"
    )
    _, second_path = core_logging.configure_logger(
        name, log_dir=tmp_path / "two"
    )

    logger.info("after move")
    for handler in logger.handlers:
        handler.flush()

    file_handlers = [
        h for h in logger.handlers if getattr(h, "_anime_quiz_file", False)
    ]
    assert len(file_handlers) == 1
    assert second_path.parent == tmp_path / "two"
    assert _records(second_path)[0]["message"] == "after move"
    assert first_path.read_text(encoding="utf-8") == ""

    _close(logger)


def test_configure_logger_fallback_directory(tmp_path, monkeypatch):
    target = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "anime_quiz.test_blocked", log_dir=target
    )

    assert log_path.parent == fallback
    assert log_path.exists()

    _close(logger)


def test_configure_logger_rotating_handler_fallback(tmp_path, monkeypatch):
    calls = {"count": 0}
    fallback_dir = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback_dir)

    logger, log_path = core_logging.configure_logger(
        "anime_quiz.test_rotating",
        log_dir=tmp_path / "primary",
        filename="rotate.log",
    )

    assert log_path == fallback_dir / "rotate.log"
    assert calls["count"] == 2

    _close(logger)


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))

    assert core_logging._fallback_log_dir() == tmp_path / "anime-quiz-logs"


def test_coerce_level_defaults_to_info():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level("debug") == logging.DEBUG
