"""Battle state machine gating which board accepts input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import random

from hybridgo.constants import COLORS, DEFAULT_SUMMON_ATTEMPTS, HOME_ROWS, PIECE_TYPES
from hybridgo.errors import BoardFullError, InsufficientTokensError, InvalidTransitionError
from hybridgo.xiangqi_rules import XiangqiRulesEngine


class BattlePhase(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    RESOLVED = "resolved"
    FORTRESS_PENDING = "fortress_pending"


BATTLE_TRANSITIONS: dict[BattlePhase, frozenset[BattlePhase]] = {
    BattlePhase.IDLE: frozenset({BattlePhase.ACTIVE}),
    BattlePhase.ACTIVE: frozenset({BattlePhase.ACTIVE, BattlePhase.RESOLVED, BattlePhase.IDLE}),
    BattlePhase.RESOLVED: frozenset({BattlePhase.FORTRESS_PENDING, BattlePhase.IDLE}),
    BattlePhase.FORTRESS_PENDING: frozenset({BattlePhase.IDLE}),
}


@dataclass(slots=True)
class SummonPlacement:
    row: int
    col: int
    color: str
    piece_type: str


class BattleStateMachine:
    """Owns the single battle state: ``Idle | Active | Resolved | FortressPending``.

    ``Resolved`` is transient: the orchestrator moves straight on to
    ``FortressPending`` so the winner can claim the fortress reward.
    """

    def __init__(self) -> None:
        self._phase = BattlePhase.IDLE
        self._participants: set[str] = set()
        self._winner: str | None = None

    @property
    def phase(self) -> BattlePhase:
        return self._phase

    @property
    def participants(self) -> frozenset[str]:
        return frozenset(self._participants)

    @property
    def winner(self) -> str | None:
        return self._winner

    def is_idle(self) -> bool:
        return self._phase == BattlePhase.IDLE

    def is_active(self) -> bool:
        return self._phase == BattlePhase.ACTIVE

    def is_fortress_pending(self) -> bool:
        return self._phase == BattlePhase.FORTRESS_PENDING

    def _transition(self, target: BattlePhase) -> None:
        if target not in BATTLE_TRANSITIONS[self._phase]:
            raise InvalidTransitionError(f"cannot move battle from {self._phase.value} to {target.value}")
        self._phase = target

    def activate(self, color: str) -> bool:
        """Enter or stay in ``Active`` with ``color`` as a participant.

        Returns ``True`` when this call started a new battle.
        """
        if color not in COLORS:
            raise ValueError(f"unknown color: {color!r}")
        started = self._phase == BattlePhase.IDLE
        self._transition(BattlePhase.ACTIVE)
        self._participants.add(color)
        return started

    def resolve(self, winner: str) -> None:
        if winner not in COLORS:
            raise ValueError(f"unknown color: {winner!r}")
        self._transition(BattlePhase.RESOLVED)
        self._winner = winner

    def grant_fortress(self) -> str:
        """Turn a resolved battle into the winner's one-shot fortress right."""
        if self._winner is None:
            raise InvalidTransitionError("no battle winner to reward")
        self._transition(BattlePhase.FORTRESS_PENDING)
        return self._winner

    def finish(self) -> None:
        """Return to ``Idle`` after a fortress is placed or skipped, or on deactivation."""
        self._transition(BattlePhase.IDLE)
        self._participants.clear()
        self._winner = None

    def reset(self) -> None:
        self._phase = BattlePhase.IDLE
        self._participants.clear()
        self._winner = None

    def summon(
        self,
        tactical: XiangqiRulesEngine,
        piece_type: str,
        color: str,
        *,
        tokens_available: int,
        rng: random.Random,
        max_attempts: int = DEFAULT_SUMMON_ATTEMPTS,
    ) -> SummonPlacement:
        """Drop a new piece on a random empty home-row square and activate the battle.

        Raises ``InsufficientTokensError`` without a token to spend and
        ``BoardFullError`` after ``max_attempts`` occupied draws. Spending the
        token is left to the caller, which owns the pool.
        """
        if piece_type not in PIECE_TYPES:
            raise ValueError(f"unknown piece type: {piece_type!r}")
        if self._phase not in (BattlePhase.IDLE, BattlePhase.ACTIVE):
            raise InvalidTransitionError(f"cannot summon while battle is {self._phase.value}")
        if tokens_available < 1:
            raise InsufficientTokensError(f"{color} has no tactical tokens")

        home_rows = HOME_ROWS[color]
        for _ in range(max_attempts):
            row = rng.choice(home_rows)
            col = rng.randrange(tactical.grid.cols)
            if tactical.grid.is_empty(row, col):
                tactical.place_piece(row, col, color, piece_type)
                self.activate(color)
                return SummonPlacement(row=row, col=col, color=color, piece_type=piece_type)
        raise BoardFullError(f"no free home square found for {color} after {max_attempts} attempts")

    def to_dict(self) -> dict[str, object]:
        return {
            "phase": self._phase.value,
            "participants": sorted(self._participants),
            "winner": self._winner,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "BattleStateMachine":
        machine = cls()
        machine._phase = BattlePhase(str(data.get("phase", BattlePhase.IDLE.value)))
        participants = data.get("participants") or []
        if isinstance(participants, (list, tuple, set, frozenset)):
            machine._participants = {str(color) for color in participants if color in COLORS}
        winner = data.get("winner")
        machine._winner = str(winner) if winner in COLORS else None
        return machine
