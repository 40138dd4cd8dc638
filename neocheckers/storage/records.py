from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from neocheckers.engine.board import PieceColor


logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """History storage is unreadable or corrupt."""


@dataclass(frozen=True)
class GameRecord:
    """Completed game as stored in the history.

    Attributes:
        player_name (str): Display name of the human player.
        player_color (str): Color the human played (``"cyan"``).
        winner (str): Winning color.
        difficulty (str): Computer difficulty label.
        moves (int): Number of completed turns.
        id (Optional[int]): Assigned by the store on save.
        created_at (Optional[str]): ISO-8601 UTC timestamp assigned on save.
    """

    player_name: str
    player_color: str
    winner: str
    difficulty: str
    moves: int
    id: Optional[int] = None
    created_at: Optional[str] = None

    @property
    def outcome(self) -> str:
        return "player" if self.winner == self.player_color else "ai"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameRecord":
        winner = str(data["winner"])
        if winner not in {c.value for c in PieceColor}:
            raise ValueError(f"invalid winner: {winner!r}")
        return cls(
            player_name=str(data.get("player_name", "GUEST")),
            player_color=str(data.get("player_color", PieceColor.CYAN.value)),
            winner=winner,
            difficulty=str(data.get("difficulty", "medium")),
            moves=int(data.get("moves", 0)),
            id=int(data["id"]) if data.get("id") is not None else None,
            created_at=data.get("created_at"),
        )


def _stamp(record: GameRecord, next_id: int) -> GameRecord:
    return replace(
        record,
        id=next_id,
        created_at=datetime.now(timezone.utc).isoformat(),
    )


class InMemoryRecordStore:
    """Thread-safe in-memory game history."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[GameRecord] = []

    def save(self, record: GameRecord) -> GameRecord:
        with self._lock:
            next_id = max((r.id or 0 for r in self._records), default=0) + 1
            saved = _stamp(record, next_id)
            self._records.append(saved)
        return saved

    def list(self) -> List[GameRecord]:
        with self._lock:
            return sorted(self._records, key=lambda r: r.id or 0, reverse=True)


class JSONRecordStore:
    """Game history persisted to a JSON file.

    Format: ``{"games": [{...record...}, ...]}``, newest first. The file is
    created on first save; a missing file reads as an empty history.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.RLock()

    def _load(self) -> List[GameRecord]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict) or not isinstance(data.get("games"), list):
                raise ValueError("invalid history format")
            return [GameRecord.from_dict(g) for g in data["games"]]
        except (ValueError, KeyError, TypeError) as e:
            # JSONDecodeError is a ValueError
            raise RecordStoreError(f"corrupt history file {self.path}: {e}") from e

    def _dump(self, records: List[GameRecord]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump({"games": [asdict(r) for r in records]}, f, indent=2)
        os.replace(tmp, self.path)

    def save(self, record: GameRecord) -> GameRecord:
        with self._lock:
            records = self._load()
            next_id = max((r.id or 0 for r in records), default=0) + 1
            saved = _stamp(record, next_id)
            self._dump([saved] + records)
        logger.info("game record saved", extra={"path": self.path, "record_id": saved.id})
        return saved

    def list(self) -> List[GameRecord]:
        with self._lock:
            return sorted(self._load(), key=lambda r: r.id or 0, reverse=True)


RecordStore = Union[InMemoryRecordStore, JSONRecordStore]


def open_store(path: Optional[str]) -> RecordStore:
    if not path:
        return InMemoryRecordStore()
    return JSONRecordStore(path)
