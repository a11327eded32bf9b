"""Key-value persistence for hero stats and the leaderboard.

The battle engine only needs ``get``/``put`` on JSON-compatible records.
:class:`InMemoryStatStore` backs tests and simulations;
:class:`JsonFileStatStore` keeps every key in one JSON document on disk,
the way a browser build would use local storage.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class StatStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the record stored under *key*, or ``None``."""

    @abstractmethod
    def put(self, key: str, record: Any) -> None:
        """Store *record* (JSON-compatible) under *key*, replacing any old one."""


class InMemoryStatStore(StatStore):
    """Dict-backed store.  Records are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        record = self._data.get(key)
        return copy.deepcopy(record)

    def put(self, key: str, record: Any) -> None:
        self._data[key] = copy.deepcopy(record)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStatStore(StatStore):
    """All keys in a single JSON object at *path*.

    The file is created on first write; parent directories are created
    as needed.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text())

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def put(self, key: str, record: Any) -> None:
        data = self._read()
        data[key] = record
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        logger.debug("Saved %r to %s", key, self.path)


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

class LeaderboardEntry(BaseModel):
    player_name: str
    score: int = Field(ge=0)
    level: int = Field(default=1, ge=1)
    completion_percentage: float = Field(default=0.0, ge=0, le=100)
    recorded_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class Leaderboard:
    """Score table persisted under a single store key.

    Entries rank by score, then level, both descending; earlier entries
    win ties.  Only the best ``max_entries`` are kept.
    """

    def __init__(
        self,
        store: StatStore,
        key: str = "leaderboard",
        max_entries: int = 100,
    ) -> None:
        self._store = store
        self._key = key
        self._max_entries = max_entries

    def entries(self) -> list[LeaderboardEntry]:
        raw = self._store.get(self._key) or []
        return [LeaderboardEntry.model_validate(r) for r in raw]

    def add_entry(self, entry: LeaderboardEntry) -> int:
        """Insert *entry* and return its 1-based rank (0 if it did not fit)."""
        ranked = sort_entries(self.entries() + [entry])
        kept = ranked[: self._max_entries]
        self._store.put(self._key, [e.model_dump() for e in kept])
        for rank, e in enumerate(kept, start=1):
            if e is entry:
                return rank
        return 0

    def top(self, n: int = 10) -> list[LeaderboardEntry]:
        return sort_entries(self.entries())[:n]


def sort_entries(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """Best first: higher score, then higher level.  Stable for ties."""
    return sorted(entries, key=lambda e: (-e.score, -e.level))
