from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
import time
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    path: Path

    def exists(self) -> bool:
        return self.path.exists()

    def is_fresh(self, ttl_days: int) -> bool:
        if not self.exists():
            return False
        age_seconds = time.time() - self.path.stat().st_mtime
        return age_seconds <= ttl_days * 86400

    def read_json(self) -> Any:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def write_json(self, payload: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        tmp.replace(self.path)


class FileCache:
    """JSON payloads keyed by relative path under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def entry(self, *parts: str) -> CacheEntry:
        return CacheEntry(self.base_dir.joinpath(*parts))
