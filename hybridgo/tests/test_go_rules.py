"""Strategic board tests: capture, suicide, fortress anchoring and territory."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hybridgo.constants import BLACK, STONE_FORTRESS, WHITE  # noqa: E402
from hybridgo.errors import OccupiedCellError, OutOfBoundsError, SuicideError  # noqa: E402
from hybridgo.go_rules import GoRulesEngine  # noqa: E402


def _engine(stones: list[tuple[int, int, str]], size: int = 19) -> GoRulesEngine:
    engine = GoRulesEngine(size=size)
    for row, col, color in stones:
        engine.place_stone(row, col, color)
    return engine


def test_single_stone_with_no_liberties_is_captured() -> None:
    engine = _engine([(5, 5, WHITE), (4, 5, BLACK), (6, 5, BLACK), (5, 4, BLACK)])

    outcome = engine.place_stone(5, 6, BLACK)

    assert outcome.captured == [(5, 5)]
    assert outcome.captured_count == 1
    assert engine.get_stone_at(5, 5) is None
    assert engine.get_stone_at(5, 6).color == BLACK


def test_whole_group_is_removed_when_its_last_liberty_is_filled() -> None:
    engine = _engine([(0, 0, WHITE), (0, 1, WHITE), (1, 0, BLACK), (1, 1, BLACK)])

    outcome = engine.place_stone(0, 2, BLACK)

    assert outcome.captured == [(0, 0), (0, 1)]
    assert engine.get_stone_at(0, 0) is None
    assert engine.get_stone_at(0, 1) is None


def test_suicide_is_rejected_and_board_is_unchanged() -> None:
    engine = _engine([(0, 1, BLACK), (1, 0, BLACK)])
    before = engine.grid.snapshot()

    with pytest.raises(SuicideError):
        engine.place_stone(0, 0, WHITE)

    assert engine.grid.snapshot() == before


def test_capturing_move_is_not_suicide_even_without_own_liberties() -> None:
    engine = _engine([(0, 1, BLACK), (0, 2, WHITE), (1, 1, WHITE), (1, 0, BLACK)])

    outcome = engine.place_stone(0, 0, WHITE)

    assert outcome.captured == [(0, 1)]
    assert engine.get_stone_at(0, 0).color == WHITE


def test_occupied_and_out_of_bounds_placements_are_rejected() -> None:
    engine = _engine([(3, 3, BLACK)])

    with pytest.raises(OccupiedCellError):
        engine.place_stone(3, 3, WHITE)
    with pytest.raises(OutOfBoundsError):
        engine.place_stone(19, 0, WHITE)


def test_fortress_can_be_placed_without_liberties_and_is_never_captured() -> None:
    engine = _engine([(0, 1, BLACK), (1, 0, BLACK)])

    outcome = engine.place_fortress(0, 0, WHITE)
    assert outcome.kind == STONE_FORTRESS
    assert outcome.captured == []

    engine.place_stone(5, 5, BLACK)
    assert engine.get_stone_at(0, 0).is_fortress


def test_fortress_anchors_connected_stones_against_capture() -> None:
    engine = GoRulesEngine()
    engine.place_fortress(0, 0, WHITE)
    engine.place_stone(0, 1, WHITE)
    engine.place_stone(1, 0, BLACK)
    engine.place_stone(1, 1, BLACK)

    outcome = engine.place_stone(0, 2, BLACK)

    assert outcome.captured == []
    assert engine.get_stone_at(0, 1).color == WHITE


def test_territory_of_empty_board_is_zero() -> None:
    assert GoRulesEngine().compute_territory() == {BLACK: 0, WHITE: 0}


def test_territory_counts_single_color_regions_only() -> None:
    engine = _engine([(0, 1, BLACK), (1, 0, BLACK), (2, 2, WHITE)], size=3)

    assert engine.compute_territory() == {BLACK: 1, WHITE: 0}


def test_territory_is_recomputed_after_capture() -> None:
    engine = _engine([(0, 1, BLACK), (0, 0, WHITE), (1, 1, WHITE)], size=3)
    assert engine.compute_territory() == {BLACK: 0, WHITE: 0}

    engine.place_stone(0, 2, WHITE)

    assert engine.get_stone_at(0, 1) is None
    assert engine.compute_territory() == {BLACK: 0, WHITE: 6}


def test_center_occupant_and_out_of_range_accessors() -> None:
    engine = GoRulesEngine()
    assert engine.center == (9, 9)
    assert engine.center_occupant() is None

    engine.place_stone(9, 9, WHITE)

    assert engine.center_occupant() == WHITE
    assert engine.get_stone_at(-1, 4) is None
    assert engine.remove_stone(30, 30) is False


def test_restore_rebuilds_board_from_stone_list() -> None:
    engine = _engine([(2, 3, BLACK)])
    engine.place_fortress(4, 4, WHITE)
    stones = engine.stones()

    other = GoRulesEngine()
    other.restore(stones)

    assert other.grid == engine.grid
