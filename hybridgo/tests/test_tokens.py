"""Token economy tests: formula, monotonic merge and spend floor."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hybridgo.constants import BLACK, WHITE  # noqa: E402
from hybridgo.tokens import TokenEconomy  # noqa: E402


def test_formula_combines_territory_captures_and_center_bonus() -> None:
    economy = TokenEconomy()

    tokens = economy.compute_tokens({BLACK: 17, WHITE: 7}, {BLACK: 4, WHITE: 10}, WHITE)

    assert tokens == {BLACK: 2, WHITE: 0 + 2 + 1}


def test_custom_divisors_are_honored() -> None:
    economy = TokenEconomy(territory_per_token=4, captures_per_token=2, center_bonus=3)

    assert economy.compute_tokens({BLACK: 8, WHITE: 0}, {BLACK: 3, WHITE: 0}, BLACK) == {BLACK: 6, WHITE: 0}


@pytest.mark.parametrize("kwargs", [{"territory_per_token": 0}, {"captures_per_token": 0}, {"center_bonus": -1}])
def test_invalid_configuration_is_rejected(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        TokenEconomy(**kwargs)


def test_computed_tokens_are_monotonic_for_non_decreasing_inputs() -> None:
    economy = TokenEconomy()
    previous = {BLACK: 0, WHITE: 0}
    for step in range(0, 60, 3):
        current = economy.compute_tokens({BLACK: step, WHITE: step * 2}, {BLACK: step // 2, WHITE: step}, None)
        assert current[BLACK] >= previous[BLACK]
        assert current[WHITE] >= previous[WHITE]
        previous = current


def test_merge_keeps_the_maximum_and_reports_only_increases() -> None:
    economy = TokenEconomy()

    merged, grants = economy.merge({BLACK: 3, WHITE: 5}, {BLACK: 4, WHITE: 2})

    assert merged == {BLACK: 4, WHITE: 5}
    assert [grant.to_event() for grant in grants] == [
        {"type": "tokens_granted", "color": BLACK, "old": 3, "new": 4}
    ]


def test_spend_decrements_and_floors_at_zero() -> None:
    pool = {BLACK: 1, WHITE: 0}

    assert TokenEconomy.spend(pool, BLACK) == {BLACK: 0, WHITE: 0}
    assert TokenEconomy.spend(pool, WHITE) == {BLACK: 1, WHITE: 0}
    assert pool == {BLACK: 1, WHITE: 0}
