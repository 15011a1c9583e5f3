"""BoardGrid tests: bounds, occupancy and iteration helpers."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hybridgo.errors import OccupiedCellError, OutOfBoundsError  # noqa: E402
from hybridgo.grid import BoardGrid  # noqa: E402


def test_grid_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        BoardGrid(0, 9)


def test_get_out_of_range_returns_none_instead_of_failing() -> None:
    grid: BoardGrid[str] = BoardGrid(3, 3)
    assert grid.get(-1, 0) is None
    assert grid.get(3, 3) is None
    assert grid.remove(5, 5) is None


def test_place_checks_bounds_then_occupancy() -> None:
    grid: BoardGrid[str] = BoardGrid(3, 3)
    grid.place(1, 1, "x")

    with pytest.raises(OccupiedCellError):
        grid.place(1, 1, "y")
    with pytest.raises(OutOfBoundsError):
        grid.place(3, 0, "y")
    assert grid.get(1, 1) == "x"


def test_neighbors_are_orthogonal_and_clipped_at_edges() -> None:
    grid: BoardGrid[str] = BoardGrid(3, 3)
    assert sorted(grid.neighbors(0, 0)) == [(0, 1), (1, 0)]
    assert sorted(grid.neighbors(1, 1)) == [(0, 1), (1, 0), (1, 2), (2, 1)]


def test_occupied_and_empty_cells_partition_the_board() -> None:
    grid: BoardGrid[str] = BoardGrid(2, 3)
    grid.place(0, 2, "a")
    grid.place(1, 0, "b")

    assert list(grid.occupied()) == [(0, 2, "a"), (1, 0, "b")]
    assert len(list(grid.empty_cells())) == 4
    assert grid.count_occupied() == 2


def test_remove_returns_previous_value_and_clear_empties_everything() -> None:
    grid: BoardGrid[str] = BoardGrid(2, 2)
    grid.place(0, 0, "a")
    grid.place(1, 1, "b")

    assert grid.remove(0, 0) == "a"
    assert grid.is_empty(0, 0)
    grid.clear()
    assert grid.count_occupied() == 0


def test_snapshot_equality_tracks_cell_contents() -> None:
    left: BoardGrid[str] = BoardGrid(2, 2)
    right: BoardGrid[str] = BoardGrid(2, 2)
    left.place(0, 1, "a")
    assert left != right

    right.set(0, 1, "a")
    assert left == right
    assert left.snapshot() == [[None, "a"], [None, None]]
