"""Bounded undo stack of full-state snapshots."""

from __future__ import annotations

from collections import deque
from copy import deepcopy
from typing import Any

from hybridgo.constants import DEFAULT_HISTORY_LIMIT
from hybridgo.errors import NoHistoryError


class GameHistory:
    """LIFO stack capped at ``limit`` entries; the oldest snapshot is evicted first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be >= 1")
        self.limit = limit
        self._entries: deque[dict[str, Any]] = deque(maxlen=limit)

    def push(self, snapshot: dict[str, Any]) -> None:
        self._entries.append(deepcopy(snapshot))

    def pop(self) -> dict[str, Any]:
        if not self._entries:
            raise NoHistoryError("nothing to undo")
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
