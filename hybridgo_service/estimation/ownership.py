"""Territory derived from per-point ownership values in [-1, 1]."""

from __future__ import annotations

from collections.abc import Iterable

OWNERSHIP_THRESHOLD = 0.5


def count_ownership(values: Iterable[float], *, threshold: float = OWNERSHIP_THRESHOLD) -> dict[str, int]:
    """Negative values lean black, positive lean white; anything within the threshold is dame."""
    black = white = dame = 0
    for value in values:
        if value < -threshold:
            black += 1
        elif value > threshold:
            white += 1
        else:
            dame += 1
    return {"black": black, "white": white, "dame": dame}
