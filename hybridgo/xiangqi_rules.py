"""Tactical-board rules: per-piece movement, captures and the missing-general win."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from hybridgo.constants import (
    ADVISOR,
    BLACK,
    CANNON,
    COLORS,
    ELEPHANT,
    GENERAL,
    HOME_ROWS,
    HORSE,
    PALACE_COLS,
    PALACE_ROWS,
    PIECE_TYPES,
    ROOK,
    SOLDIER,
    TACTICAL_COLS,
    TACTICAL_ROWS,
    opponent,
)
from hybridgo.errors import IllegalPieceMoveError
from hybridgo.grid import BoardGrid


@dataclass(frozen=True, slots=True)
class Piece:
    """One piece on the tactical board."""

    color: str
    piece_type: str


@dataclass(slots=True)
class MoveOutcome:
    """Accepted move; ``captured`` holds the removed enemy piece, if any."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    piece: Piece
    captured: Piece | None = None


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class XiangqiRulesEngine:
    """Rule engine bound to one tactical grid (10 rows x 9 columns).

    Black owns rows 0-4 and white owns rows 5-9; the river runs between
    rows 4 and 5.
    """

    def __init__(self, grid: BoardGrid[Piece] | None = None) -> None:
        self.grid: BoardGrid[Piece] = grid if grid is not None else BoardGrid(TACTICAL_ROWS, TACTICAL_COLS)
        self._fielded_generals: set[str] = {
            piece.color for _, _, piece in self.grid.occupied() if piece.piece_type == GENERAL
        }
        self._validators: dict[str, Callable[[int, int, int, int, str], bool]] = {
            ROOK: self._is_valid_rook_move,
            HORSE: self._is_valid_horse_move,
            ELEPHANT: self._is_valid_elephant_move,
            ADVISOR: self._is_valid_advisor_move,
            GENERAL: self._is_valid_general_move,
            CANNON: self._is_valid_cannon_move,
            SOLDIER: self._is_valid_soldier_move,
        }

    def get_piece_at(self, row: int, col: int) -> Piece | None:
        return self.grid.get(row, col)

    def place_piece(self, row: int, col: int, color: str, piece_type: str) -> Piece:
        if color not in COLORS:
            raise ValueError(f"unknown color: {color!r}")
        if piece_type not in PIECE_TYPES:
            raise ValueError(f"unknown piece type: {piece_type!r}")
        piece = Piece(color=color, piece_type=piece_type)
        self.grid.place(row, col, piece)
        if piece_type == GENERAL:
            self._fielded_generals.add(color)
        return piece

    def remove_piece_at(self, row: int, col: int) -> bool:
        return self.grid.remove(row, col) is not None

    def clear(self) -> None:
        self.grid.clear()
        self._fielded_generals.clear()

    @property
    def fielded_generals(self) -> frozenset[str]:
        """Colors that put a general on the board since it was last cleared."""
        return frozenset(self._fielded_generals)

    def restore(self, pieces: list[dict[str, object]], fielded_generals: list[str] | None = None) -> None:
        self.clear()
        for cell in pieces:
            self.place_piece(int(cell["row"]), int(cell["col"]), str(cell["color"]), str(cell["type"]))
        if fielded_generals is not None:
            self._fielded_generals = {color for color in fielded_generals if color in COLORS}

    def general_of(self, color: str) -> tuple[int, int] | None:
        for row, col, piece in self.grid.occupied():
            if piece.piece_type == GENERAL and piece.color == color:
                return row, col
        return None

    def pieces(self) -> list[dict[str, object]]:
        return [
            {"row": row, "col": col, "color": piece.color, "type": piece.piece_type}
            for row, col, piece in self.grid.occupied()
        ]

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------

    def is_legal_move(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        piece_type: str,
        color: str,
    ) -> bool:
        if not self.grid.in_bounds(from_row, from_col) or not self.grid.in_bounds(to_row, to_col):
            return False
        if (from_row, from_col) == (to_row, to_col):
            return False
        validator = self._validators.get(piece_type)
        if validator is None or color not in COLORS:
            return False

        target = self.grid.get(to_row, to_col)
        if target is not None and target.color == color:
            return False
        return validator(from_row, from_col, to_row, to_col, color)

    def legal_destinations(self, row: int, col: int) -> list[tuple[int, int]]:
        """Every square the piece on (row, col) may move to, in row-major order."""
        piece = self.grid.get(row, col)
        if piece is None:
            return []
        return [
            (to_row, to_col)
            for to_row in range(self.grid.rows)
            for to_col in range(self.grid.cols)
            if self.is_legal_move(row, col, to_row, to_col, piece.piece_type, piece.color)
        ]

    def move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> MoveOutcome:
        """Move the ``color`` piece on the source square, capturing an enemy at the target."""
        self.grid.require_in_bounds(from_row, from_col)
        self.grid.require_in_bounds(to_row, to_col)

        piece = self.grid.get(from_row, from_col)
        if piece is None:
            raise IllegalPieceMoveError(f"no piece at ({from_row}, {from_col})")
        if piece.color != color:
            raise IllegalPieceMoveError(f"piece at ({from_row}, {from_col}) belongs to {piece.color}")
        if not self.is_legal_move(from_row, from_col, to_row, to_col, piece.piece_type, piece.color):
            raise IllegalPieceMoveError(
                f"{piece.piece_type} cannot move from ({from_row}, {from_col}) to ({to_row}, {to_col})"
            )

        captured = self.grid.remove(to_row, to_col)
        self.grid.remove(from_row, from_col)
        self.grid.set(to_row, to_col, piece)
        return MoveOutcome(
            from_row=from_row,
            from_col=from_col,
            to_row=to_row,
            to_col=to_col,
            piece=piece,
            captured=captured,
        )

    def check_win_condition(self) -> str | None:
        """Return the winning color when one side has lost its general.

        Only colors that fielded a general since the last clear can lose this
        way; black is checked first.
        """
        has_general = {color: False for color in COLORS}
        for _, _, piece in self.grid.occupied():
            if piece.piece_type == GENERAL:
                has_general[piece.color] = True

        for color in COLORS:
            if color in self._fielded_generals and not has_general[color]:
                return opponent(color)
        return None

    # ------------------------------------------------------------------
    # Per-piece validators
    # ------------------------------------------------------------------

    def _count_between(self, from_row: int, from_col: int, to_row: int, to_col: int) -> int:
        """Occupied squares strictly between two squares on one row or column."""
        step_row, step_col = _sign(to_row - from_row), _sign(to_col - from_col)
        row, col = from_row + step_row, from_col + step_col
        count = 0
        while (row, col) != (to_row, to_col):
            if self.grid.get(row, col) is not None:
                count += 1
            row, col = row + step_row, col + step_col
        return count

    @staticmethod
    def _in_palace(row: int, col: int, color: str) -> bool:
        return row in PALACE_ROWS[color] and col in PALACE_COLS

    def _is_valid_rook_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if from_row != to_row and from_col != to_col:
            return False
        return self._count_between(from_row, from_col, to_row, to_col) == 0

    def _is_valid_horse_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        d_row, d_col = to_row - from_row, to_col - from_col
        if (abs(d_row), abs(d_col)) not in {(1, 2), (2, 1)}:
            return False
        if abs(d_row) == 2:
            leg = (from_row + _sign(d_row), from_col)
        else:
            leg = (from_row, from_col + _sign(d_col))
        return self.grid.get(*leg) is None

    def _is_valid_elephant_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if abs(to_row - from_row) != 2 or abs(to_col - from_col) != 2:
            return False
        if to_row not in HOME_ROWS[color]:
            return False
        mid_row, mid_col = (from_row + to_row) // 2, (from_col + to_col) // 2
        return self.grid.get(mid_row, mid_col) is None

    def _is_valid_advisor_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if abs(to_row - from_row) != 1 or abs(to_col - from_col) != 1:
            return False
        return self._in_palace(to_row, to_col, color)

    def _is_valid_general_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if abs(to_row - from_row) + abs(to_col - from_col) == 1:
            return self._in_palace(to_row, to_col, color)
        return self._is_general_face_off(from_row, from_col, to_row, to_col, color)

    def _is_general_face_off(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if from_col != to_col:
            return False
        target = self.grid.get(to_row, to_col)
        if target is None or target.piece_type != GENERAL or target.color != opponent(color):
            return False
        return self._count_between(from_row, from_col, to_row, to_col) == 0

    def _is_valid_cannon_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        if from_row != to_row and from_col != to_col:
            return False
        screens = self._count_between(from_row, from_col, to_row, to_col)
        if self.grid.get(to_row, to_col) is not None:
            return screens == 1
        return screens == 0

    def _is_valid_soldier_move(self, from_row: int, from_col: int, to_row: int, to_col: int, color: str) -> bool:
        forward = 1 if color == BLACK else -1
        d_row, d_col = to_row - from_row, to_col - from_col
        if (d_row, d_col) == (forward, 0):
            return True
        crossed_river = from_row not in HOME_ROWS[color]
        return crossed_river and d_row == 0 and abs(d_col) == 1
