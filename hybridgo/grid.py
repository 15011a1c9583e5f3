"""Generic fixed-size board grid with no game rules attached."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from hybridgo.errors import OccupiedCellError, OutOfBoundsError

T = TypeVar("T")

ORTHOGONAL_STEPS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class BoardGrid(Generic[T]):
    """Row-major grid of optional cell values; ``None`` marks an empty cell."""

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 1 or cols < 1:
            raise ValueError("grid dimensions must be >= 1")
        self.rows = rows
        self.cols = cols
        self._cells: list[list[T | None]] = [[None] * cols for _ in range(rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def require_in_bounds(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBoundsError(f"({row}, {col}) is outside the {self.rows}x{self.cols} board")

    def get(self, row: int, col: int) -> T | None:
        """Return the cell value, or ``None`` for empty and out-of-range cells."""
        if not self.in_bounds(row, col):
            return None
        return self._cells[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self._cells[row][col] is None

    def place(self, row: int, col: int, value: T) -> None:
        self.require_in_bounds(row, col)
        if self._cells[row][col] is not None:
            raise OccupiedCellError(f"({row}, {col}) is already occupied")
        self._cells[row][col] = value

    def set(self, row: int, col: int, value: T | None) -> None:
        self.require_in_bounds(row, col)
        self._cells[row][col] = value

    def remove(self, row: int, col: int) -> T | None:
        """Empty the cell and return what was there; out-of-range is a no-op."""
        if not self.in_bounds(row, col):
            return None
        value = self._cells[row][col]
        self._cells[row][col] = None
        return value

    def clear(self) -> None:
        for row in self._cells:
            for col in range(self.cols):
                row[col] = None

    def neighbors(self, row: int, col: int) -> Iterator[tuple[int, int]]:
        for d_row, d_col in ORTHOGONAL_STEPS:
            n_row, n_col = row + d_row, col + d_col
            if self.in_bounds(n_row, n_col):
                yield n_row, n_col

    def occupied(self) -> Iterator[tuple[int, int, T]]:
        for row_idx, row in enumerate(self._cells):
            for col_idx, value in enumerate(row):
                if value is not None:
                    yield row_idx, col_idx, value

    def empty_cells(self) -> Iterator[tuple[int, int]]:
        for row_idx, row in enumerate(self._cells):
            for col_idx, value in enumerate(row):
                if value is None:
                    yield row_idx, col_idx

    def count_occupied(self) -> int:
        return sum(1 for _ in self.occupied())

    def snapshot(self) -> list[list[T | None]]:
        return [list(row) for row in self._cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardGrid):
            return NotImplemented
        return self.rows == other.rows and self.cols == other.cols and self._cells == other._cells

    def __repr__(self) -> str:
        return f"BoardGrid(rows={self.rows}, cols={self.cols}, occupied={self.count_occupied()})"
