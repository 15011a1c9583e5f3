"""Trace logger tests: reset, versioned states and intent journal."""

from __future__ import annotations

import json
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hybridgo.game_logger import GameLogger  # noqa: E402


def test_reset_removes_previous_trace_but_keeps_unrelated_files(tmp_path: Path) -> None:
    (tmp_path / "state_v3.json").write_text("{}", encoding="utf-8")
    (tmp_path / "intents.json").write_text("[]", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")

    GameLogger(tmp_path).reset()

    assert sorted(path.name for path in tmp_path.iterdir()) == ["notes.txt"]


def test_write_state_lands_in_versioned_file(tmp_path: Path) -> None:
    game_logger = GameLogger(tmp_path / "nested")

    game_logger.write_state(7, {"version": 7})

    state_path = tmp_path / "nested" / "state_v7.json"
    assert json.loads(state_path.read_text(encoding="utf-8")) == {"version": 7}
    assert not (tmp_path / "nested" / "state_v8.json").exists()
    assert not (tmp_path / "nested" / "state_v7.json.tmp").exists()


def test_record_intent_appends_numbered_entries(tmp_path: Path) -> None:
    game_logger = GameLogger(tmp_path)

    game_logger.record_intent("place_stone", {"row": 1, "col": 2}, version=2, accepted=True)
    game_logger.record_intent("undo", {}, version=2, accepted=False, code="NO_HISTORY")

    journal = game_logger.read_intents()
    assert [entry["seq"] for entry in journal] == [1, 2]
    assert journal[1] == {
        "seq": 2,
        "version": 2,
        "intent": "undo",
        "params": {},
        "accepted": False,
        "code": "NO_HISTORY",
    }
