"""JSON-lines helpers used for catalog tables and generated quizzes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Mapping

__all__ = ["read_jsonl", "write_jsonl"]


def read_jsonl(path: Path) -> List[dict]:
    """Return one decoded object per non-blank line of ``path``.

    Lines that do not decode to a JSON object raise :class:`ValueError`
    naming the file and line number.
    """

    data: List[dict] = []
    with Path(path).open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(
                    f"{path}:{lineno}: invalid JSON ({exc.msg})"
                ) from exc
            if not isinstance(record, dict):
                raise ValueError(f"{path}:{lineno}: expected a JSON object")
            data.append(record)
    return data


def write_jsonl(path: Path, records: Iterable[Mapping[str, object]]) -> int:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with p.open("w", encoding="utf-8") as fh:
        for rec in records:
            fh.write(json.dumps(rec, ensure_ascii=False))
            fh.write("\n")
            count += 1
    return count
