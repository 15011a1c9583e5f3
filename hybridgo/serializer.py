"""State serializer helpers: snapshots, public view and the estimation request."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from hybridgo.constants import COLORS, GO_BOARD_SIZE, PIECE_TYPES, STONE_KINDS, TACTICAL_COLS, TACTICAL_ROWS


def _assert_color(value: Any, path: str) -> None:
    if value not in COLORS:
        raise AssertionError(f"{path} must be one of {COLORS}")


def _assert_color_or_none(value: Any, path: str) -> None:
    if value is None:
        return
    _assert_color(value, path)


def _assert_count_map(value: Any, path: str) -> None:
    if not isinstance(value, dict):
        raise AssertionError(f"{path} must be {{black, white}} object")
    for color in COLORS:
        raw_count = value.get(color)
        if type(raw_count) is not int:
            raise AssertionError(f"{path}.{color} must be int")
        if raw_count < 0:
            raise AssertionError(f"{path}.{color} must be >= 0")


def _assert_cells(cells: Any, path: str, kind_field: str, allowed: Any, *, rows: int, cols: int) -> None:
    if not isinstance(cells, list):
        raise AssertionError(f"{path} must be list")
    seen: set[tuple[int, int]] = set()
    for idx, cell in enumerate(cells):
        if not isinstance(cell, dict):
            raise AssertionError(f"{path}[{idx}] must be object")
        row, col = cell.get("row"), cell.get("col")
        if type(row) is not int or type(col) is not int:
            raise AssertionError(f"{path}[{idx}] must carry int row/col")
        if not (0 <= row < rows and 0 <= col < cols):
            raise AssertionError(f"{path}[{idx}] ({row}, {col}) is outside the {rows}x{cols} board")
        if (row, col) in seen:
            raise AssertionError(f"{path} contains duplicate cell ({row}, {col})")
        seen.add((row, col))
        _assert_color(cell.get("color"), f"{path}[{idx}].color")
        if cell.get(kind_field) not in allowed:
            raise AssertionError(f"{path}[{idx}].{kind_field} is invalid")


def _assert_strategic_canonical(strategic: Any) -> None:
    if not isinstance(strategic, dict):
        raise AssertionError("state.strategic must be object")
    _assert_cells(
        strategic.get("stones"),
        "state.strategic.stones",
        "kind",
        STONE_KINDS,
        rows=GO_BOARD_SIZE,
        cols=GO_BOARD_SIZE,
    )
    for field in ("territory", "tokens", "captured"):
        _assert_count_map(strategic.get(field), f"state.strategic.{field}")
    _assert_color(strategic.get("current_player"), "state.strategic.current_player")

    moves = strategic.get("moves")
    if not isinstance(moves, list):
        raise AssertionError("state.strategic.moves must be list")
    for idx, move in enumerate(moves):
        if not isinstance(move, dict):
            raise AssertionError(f"state.strategic.moves[{idx}] must be object")
        _assert_color(move.get("color"), f"state.strategic.moves[{idx}].color")


def _assert_tactical_canonical(tactical: Any) -> None:
    if not isinstance(tactical, dict):
        raise AssertionError("state.tactical must be object")
    _assert_cells(
        tactical.get("pieces"),
        "state.tactical.pieces",
        "type",
        PIECE_TYPES,
        rows=TACTICAL_ROWS,
        cols=TACTICAL_COLS,
    )
    _assert_color(tactical.get("current_player"), "state.tactical.current_player")
    fielded = tactical.get("fielded_generals", [])
    if not isinstance(fielded, list):
        raise AssertionError("state.tactical.fielded_generals must be list")
    for idx, color in enumerate(fielded):
        _assert_color(color, f"state.tactical.fielded_generals[{idx}]")


def _assert_battle_canonical(battle: Any) -> None:
    if not isinstance(battle, dict):
        raise AssertionError("state.battle must be object")
    if battle.get("phase") not in ("idle", "active", "resolved", "fortress_pending"):
        raise AssertionError("state.battle.phase is invalid")
    participants = battle.get("participants")
    if not isinstance(participants, list):
        raise AssertionError("state.battle.participants must be list")
    for idx, color in enumerate(participants):
        _assert_color(color, f"state.battle.participants[{idx}]")
    _assert_color_or_none(battle.get("winner"), "state.battle.winner")
    if battle.get("phase") == "fortress_pending" and battle.get("winner") is None:
        raise AssertionError("state.battle.winner is required while a fortress is pending")


def load_state(state: dict[str, Any]) -> dict[str, Any]:
    """Clone and validate a complete state before the orchestrator restores it."""

    cloned = deepcopy(state)
    _assert_strategic_canonical(cloned.get("strategic"))
    _assert_tactical_canonical(cloned.get("tactical"))
    _assert_battle_canonical(cloned.get("battle"))
    if type(cloned.get("game_over")) is not bool:
        raise AssertionError("state.game_over must be bool")
    _assert_color_or_none(cloned.get("winner"), "state.winner")
    return cloned


def dump_state(state: dict[str, Any] | None) -> dict[str, Any]:
    """Export complete internal state for persistence."""

    if state is None:
        return {}
    return deepcopy(state)


def get_public_state(state: dict[str, Any] | None) -> dict[str, Any]:
    """Project complete internal state to what the rendering side needs."""

    if state is None:
        return {}

    strategic = state.get("strategic") or {}
    tactical = state.get("tactical") or {}
    battle = state.get("battle") or {}
    return {
        "version": int(state.get("version", 0)),
        "stones": deepcopy(strategic.get("stones", [])),
        "pieces": deepcopy(tactical.get("pieces", [])),
        "territory": dict(strategic.get("territory", {})),
        "tokens": dict(strategic.get("tokens", {})),
        "captured": dict(strategic.get("captured", {})),
        "strategic_turn": strategic.get("current_player"),
        "tactical_turn": tactical.get("current_player"),
        "battle": deepcopy(battle),
        "game_over": bool(state.get("game_over", False)),
        "winner": state.get("winner"),
    }


def encode_coord(row: int, col: int, size: int = GO_BOARD_SIZE) -> str:
    """Column 0 is ``A`` (no letter skipped); row 0 is the top line, reported as ``size``."""
    return f"{chr(ord('A') + col)}{size - row}"


def build_estimate_request(stones: list[dict[str, Any]], size: int = GO_BOARD_SIZE) -> dict[str, Any]:
    """Encode every stone on the strategic board, row by row, as an estimation request."""

    ordered = sorted(stones, key=lambda stone: (int(stone["row"]), int(stone["col"])))
    moves = [
        {"player": stone["color"], "coord": encode_coord(int(stone["row"]), int(stone["col"]), size)}
        for stone in ordered
    ]
    return {"boardState": {"moves": moves, "boardSize": size}}
