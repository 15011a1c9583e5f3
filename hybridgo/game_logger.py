"""File trace of versioned game states and player intents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

STATE_GLOB = "state_v*.json"
INTENTS_FILE = "intents.json"


class GameLogger:
    """Write one ``state_v{version}.json`` per accepted intent plus an intent journal."""

    def __init__(self, log_path: str | Path) -> None:
        self._log_dir = Path(log_path)

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def reset(self) -> None:
        """Start a fresh trace, dropping the files of a previous game."""
        self._log_dir.mkdir(parents=True, exist_ok=True)
        stale = [*self._log_dir.glob(STATE_GLOB), self._log_dir / INTENTS_FILE]
        for path in stale:
            if path.is_file():
                path.unlink()

    def write_state(self, version: int, state: dict[str, Any]) -> None:
        self._write_json(self._log_dir / f"state_v{int(version)}.json", state)

    def record_intent(
        self,
        intent: str,
        params: dict[str, Any],
        *,
        version: int,
        accepted: bool,
        code: str | None = None,
    ) -> None:
        journal = self.read_intents()
        journal.append(
            {
                "seq": len(journal) + 1,
                "version": int(version),
                "intent": intent,
                "params": params,
                "accepted": accepted,
                "code": code,
            }
        )
        self._write_json(self._log_dir / INTENTS_FILE, journal)

    def read_intents(self) -> list[dict[str, Any]]:
        path = self._log_dir / INTENTS_FILE
        if not path.is_file():
            return []
        with path.open("r", encoding="utf-8") as stream:
            payload = json.load(stream)
        return payload if isinstance(payload, list) else []

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f"{path.name}.tmp")
        with temp_path.open("w", encoding="utf-8") as stream:
            json.dump(payload, stream, ensure_ascii=False, indent=2)
            stream.write("\n")
        temp_path.replace(path)
