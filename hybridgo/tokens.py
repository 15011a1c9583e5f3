"""Token economy: grants derived from territory, captures and the center point."""

from __future__ import annotations

from dataclasses import dataclass

from hybridgo.constants import (
    COLORS,
    DEFAULT_CAPTURES_PER_TOKEN,
    DEFAULT_CENTER_BONUS,
    DEFAULT_TERRITORY_PER_TOKEN,
)


@dataclass(frozen=True, slots=True)
class TokenGrant:
    """A color's stored token count rose from ``old`` to ``new``."""

    color: str
    old: int
    new: int

    def to_event(self) -> dict[str, object]:
        return {"type": "tokens_granted", "color": self.color, "old": self.old, "new": self.new}


class TokenEconomy:
    """Pure token formula plus the monotonic merge into a stored pool."""

    def __init__(
        self,
        *,
        territory_per_token: int = DEFAULT_TERRITORY_PER_TOKEN,
        captures_per_token: int = DEFAULT_CAPTURES_PER_TOKEN,
        center_bonus: int = DEFAULT_CENTER_BONUS,
    ) -> None:
        if territory_per_token < 1 or captures_per_token < 1:
            raise ValueError("token divisors must be >= 1")
        if center_bonus < 0:
            raise ValueError("center_bonus must be >= 0")
        self.territory_per_token = territory_per_token
        self.captures_per_token = captures_per_token
        self.center_bonus = center_bonus

    def compute_tokens(
        self,
        territory: dict[str, int],
        captured_stones: dict[str, int],
        center_occupant: str | None,
    ) -> dict[str, int]:
        tokens: dict[str, int] = {}
        for color in COLORS:
            earned = int(territory.get(color, 0)) // self.territory_per_token
            earned += int(captured_stones.get(color, 0)) // self.captures_per_token
            if center_occupant == color:
                earned += self.center_bonus
            tokens[color] = earned
        return tokens

    def merge(self, current: dict[str, int], computed: dict[str, int]) -> tuple[dict[str, int], list[TokenGrant]]:
        """Return ``max(current, computed)`` per color and the grants it implies."""
        merged: dict[str, int] = {}
        grants: list[TokenGrant] = []
        for color in COLORS:
            old = int(current.get(color, 0))
            new = int(computed.get(color, 0))
            if new > old:
                grants.append(TokenGrant(color=color, old=old, new=new))
                merged[color] = new
            else:
                merged[color] = old
        return merged, grants

    @staticmethod
    def spend(pool: dict[str, int], color: str, amount: int = 1) -> dict[str, int]:
        """Return a copy of ``pool`` with ``amount`` removed from ``color``, floored at 0."""
        spent = dict(pool)
        spent[color] = max(0, int(spent.get(color, 0)) - amount)
        return spent
