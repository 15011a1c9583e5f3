"""Shared constants for both boards and the token economy."""

from __future__ import annotations

BLACK = "black"
WHITE = "white"
COLORS: tuple[str, str] = (BLACK, WHITE)

STONE_NORMAL = "normal"
STONE_FORTRESS = "fortress"
STONE_KINDS: frozenset[str] = frozenset({STONE_NORMAL, STONE_FORTRESS})

ROOK = "rook"
HORSE = "horse"
ELEPHANT = "elephant"
ADVISOR = "advisor"
GENERAL = "general"
CANNON = "cannon"
SOLDIER = "soldier"
PIECE_TYPES: tuple[str, ...] = (ROOK, HORSE, ELEPHANT, ADVISOR, GENERAL, CANNON, SOLDIER)

GO_BOARD_SIZE = 19
TACTICAL_ROWS = 10
TACTICAL_COLS = 9

# Rows owned by each color on the tactical board. Black sits on rows 0-4.
HOME_ROWS: dict[str, range] = {
    BLACK: range(0, 5),
    WHITE: range(5, 10),
}
PALACE_ROWS: dict[str, range] = {
    BLACK: range(0, 3),
    WHITE: range(7, 10),
}
PALACE_COLS = range(3, 6)

DEFAULT_TERRITORY_PER_TOKEN = 8
DEFAULT_CAPTURES_PER_TOKEN = 5
DEFAULT_CENTER_BONUS = 1
DEFAULT_WIN_TERRITORY = 150
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_SUMMON_ATTEMPTS = 100


def opponent(color: str) -> str:
    if color == BLACK:
        return WHITE
    if color == WHITE:
        return BLACK
    raise ValueError(f"unknown color: {color!r}")


def empty_counts() -> dict[str, int]:
    return {BLACK: 0, WHITE: 0}
