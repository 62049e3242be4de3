from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FileRecord:
    path: str
    size: int
    mtime_ns: int
    sha256: str | None = None
