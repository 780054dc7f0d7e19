"""Generate package exposing the CLI and the generation runner."""

from .cli import build_arg_parser, main
from .runner import (
    EXIT_CODES,
    exit_code_for,
    open_store,
    run_generation,
    write_quiz,
)

__all__ = [
    "EXIT_CODES",
    "build_arg_parser",
    "exit_code_for",
    "main",
    "open_store",
    "run_generation",
    "write_quiz",
]
