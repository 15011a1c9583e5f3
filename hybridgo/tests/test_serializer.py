"""Serializer tests: coordinate encoding, estimation request and state validation."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hybridgo.serializer import (  # noqa: E402
    build_estimate_request,
    encode_coord,
    get_public_state,
    load_state,
)


def _make_state() -> dict[str, object]:
    return {
        "version": 4,
        "epoch": 2,
        "strategic": {
            "stones": [{"row": 3, "col": 3, "color": "black", "kind": "normal"}],
            "territory": {"black": 0, "white": 0},
            "tokens": {"black": 1, "white": 0},
            "captured": {"black": 0, "white": 0},
            "current_player": "white",
            "moves": [{"row": 3, "col": 3, "color": "black", "kind": "normal"}],
        },
        "tactical": {"pieces": [], "current_player": "black", "fielded_generals": []},
        "battle": {"phase": "idle", "participants": [], "winner": None},
        "game_over": False,
        "winner": None,
    }


@pytest.mark.parametrize(
    ("row", "col", "expected"),
    [(0, 0, "A19"), (18, 0, "A1"), (9, 9, "J10"), (0, 18, "S19")],
)
def test_encode_coord_uses_letter_column_and_flipped_row(row: int, col: int, expected: str) -> None:
    assert encode_coord(row, col) == expected


def test_estimate_request_lists_stones_in_board_order() -> None:
    stones = [
        {"row": 5, "col": 1, "color": "white", "kind": "normal"},
        {"row": 0, "col": 2, "color": "black", "kind": "fortress"},
    ]

    request = build_estimate_request(stones)

    assert request == {
        "boardState": {
            "moves": [{"player": "black", "coord": "C19"}, {"player": "white", "coord": "B14"}],
            "boardSize": 19,
        }
    }


def test_load_state_returns_a_validated_copy() -> None:
    state = _make_state()

    loaded = load_state(state)
    loaded["strategic"]["stones"].clear()

    assert state["strategic"]["stones"]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda state: state["strategic"]["tokens"].update(black=-1),
        lambda state: state["strategic"].update(current_player="red"),
        lambda state: state["tactical"]["pieces"].append({"row": 0, "col": 0, "color": "black", "type": "queen"}),
        lambda state: state["strategic"]["stones"].append({"row": 3, "col": 3, "color": "white", "kind": "normal"}),
        lambda state: state["battle"].update(phase="fortress_pending", winner=None),
        lambda state: state.update(game_over="no"),
        lambda state: state["strategic"]["stones"].append({"row": 19, "col": 0, "color": "white", "kind": "normal"}),
        lambda state: state["tactical"]["pieces"].append({"row": 9, "col": 9, "color": "white", "type": "rook"}),
    ],
)
def test_load_state_rejects_malformed_payloads(mutate) -> None:
    state = _make_state()
    mutate(state)

    with pytest.raises(AssertionError):
        load_state(state)


def test_public_state_flattens_boards_and_counters() -> None:
    public = get_public_state(_make_state())

    assert public["version"] == 4
    assert public["strategic_turn"] == "white"
    assert public["tactical_turn"] == "black"
    assert public["tokens"] == {"black": 1, "white": 0}
    assert public["stones"][0]["col"] == 3
    assert "moves" not in public
    assert get_public_state(None) == {}
