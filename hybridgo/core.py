"""Game orchestrator: the single entry point for player intents on both boards."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass, field
import logging
import random
from typing import Any

from hybridgo.battle import BattlePhase, BattleStateMachine
from hybridgo.constants import (
    BLACK,
    COLORS,
    DEFAULT_CAPTURES_PER_TOKEN,
    DEFAULT_CENTER_BONUS,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SUMMON_ATTEMPTS,
    DEFAULT_TERRITORY_PER_TOKEN,
    DEFAULT_WIN_TERRITORY,
    GENERAL,
    PIECE_TYPES,
    WHITE,
    empty_counts,
    opponent,
)
from hybridgo.errors import (
    GameAlreadyOverError,
    HybridGoError,
    IllegalPieceMoveError,
    InvalidTransitionError,
    WrongPhaseError,
)
from hybridgo.game_logger import GameLogger
from hybridgo.go_rules import GoRulesEngine
from hybridgo.history import GameHistory
from hybridgo.serializer import (
    build_estimate_request,
    dump_state as serializer_dump_state,
    get_public_state as serializer_get_public_state,
    load_state as serializer_load_state,
)
from hybridgo.tokens import TokenEconomy
from hybridgo.xiangqi_rules import XiangqiRulesEngine

logger = logging.getLogger(__name__)

STALE_ESTIMATE = "STALE_ESTIMATE"

UpdateCallback = Callable[[dict[str, Any]], None]
EstimateSink = Callable[[int, dict[str, Any]], None]


@dataclass(slots=True)
class RuleConfig:
    """Tunable rule constants."""

    territory_per_token: int = DEFAULT_TERRITORY_PER_TOKEN
    captures_per_token: int = DEFAULT_CAPTURES_PER_TOKEN
    center_bonus: int = DEFAULT_CENTER_BONUS
    win_territory: int = DEFAULT_WIN_TERRITORY
    history_limit: int = DEFAULT_HISTORY_LIMIT
    summon_attempts: int = DEFAULT_SUMMON_ATTEMPTS

    def __post_init__(self) -> None:
        if self.win_territory < 1:
            raise ValueError("win_territory must be >= 1")
        if self.summon_attempts < 1:
            raise ValueError("summon_attempts must be >= 1")


@dataclass(slots=True)
class IntentResult:
    accepted: bool
    code: str | None = None
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class _Change:
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    events: list[dict[str, Any]] = field(default_factory=list)
    strategic_changed: bool = False
    wants_estimate: bool = True


def _battle_event(source: BattlePhase, target: BattlePhase, **extra: Any) -> dict[str, Any]:
    return {"type": "battle", "from": source.value, "to": target.value, **extra}


class GameOrchestrator:
    """Stateful facade keeping both boards, tokens, turns and history consistent.

    Every mutating intent returns an :class:`IntentResult`. Rule violations
    never escape as exceptions: they come back as rejected results and the
    state is left exactly as it was.
    """

    def __init__(
        self,
        config: RuleConfig | None = None,
        *,
        rng: random.Random | None = None,
        on_update: UpdateCallback | None = None,
        estimate_sink: EstimateSink | None = None,
        game_logger: GameLogger | None = None,
    ) -> None:
        self.config = config or RuleConfig()
        self._rng = rng or random.Random()
        self._on_update = on_update
        self._estimate_sink = estimate_sink
        self._game_logger = game_logger

        self.strategic = GoRulesEngine()
        self.tactical = XiangqiRulesEngine()
        self.economy = TokenEconomy(
            territory_per_token=self.config.territory_per_token,
            captures_per_token=self.config.captures_per_token,
            center_bonus=self.config.center_bonus,
        )
        self.battle = BattleStateMachine()
        self.history = GameHistory(self.config.history_limit)

        self._version = 0
        self._epoch = 0
        self._reset_fields()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._version

    @property
    def epoch(self) -> int:
        """Bumped whenever a pending territory estimate becomes meaningless."""
        return self._epoch

    @property
    def territory(self) -> dict[str, int]:
        return dict(self._territory)

    @property
    def tokens(self) -> dict[str, int]:
        return dict(self._tokens)

    @property
    def captured(self) -> dict[str, int]:
        return dict(self._captured)

    @property
    def strategic_turn(self) -> str:
        return self._strategic_turn

    @property
    def tactical_turn(self) -> str:
        return self._tactical_turn

    @property
    def moves(self) -> list[dict[str, Any]]:
        return [dict(move) for move in self._moves]

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def winner(self) -> str | None:
        return self._winner

    def legal_piece_moves(self, row: int, col: int) -> list[tuple[int, int]]:
        if not self.battle.is_active():
            return []
        return self.tactical.legal_destinations(row, col)

    def estimate_request(self) -> dict[str, Any]:
        return build_estimate_request(self.strategic.stones(), self.strategic.size)

    def dump_state(self) -> dict[str, Any]:
        return serializer_dump_state(self._export_state())

    def get_public_state(self) -> dict[str, Any]:
        return serializer_get_public_state(self._export_state())

    def load_state(self, state: dict[str, Any]) -> None:
        """Restore a complete state; history is dropped and pending estimates go stale."""
        restored = serializer_load_state(state)
        self._restore_state(restored)
        self._version = int(restored.get("version", self._version))
        self._epoch += 1
        self.history.clear()

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def new_game(self) -> IntentResult:
        self.strategic.clear()
        self.tactical.clear()
        self.battle.reset()
        self.history.clear()
        self._reset_fields()
        self._version = 1
        self._epoch += 1

        if self._game_logger is not None:
            self._game_logger.reset()
        result = IntentResult(accepted=True, message="new game started, black to move")
        logger.info("new game started (epoch %s)", self._epoch)
        self._trace("new_game", {}, result)
        self._notify(result.message, result.events)
        return result

    def place_stone(self, row: int, col: int) -> IntentResult:
        return self._run("place_stone", {"row": row, "col": col}, lambda: self._do_place_stone(row, col))

    def place_fortress(self, row: int, col: int) -> IntentResult:
        return self._run("place_fortress", {"row": row, "col": col}, lambda: self._do_place_fortress(row, col))

    def summon_piece(self, piece_type: str, color: str | None = None) -> IntentResult:
        params = {"piece_type": piece_type, "color": color}
        return self._run("summon_piece", params, lambda: self._do_summon(piece_type, color))

    def move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> IntentResult:
        params = {"from_row": from_row, "from_col": from_col, "to_row": to_row, "to_col": to_col}
        return self._run("move_piece", params, lambda: self._do_move_piece(from_row, from_col, to_row, to_col))

    def skip_fortress(self) -> IntentResult:
        return self._run("skip_fortress", {}, self._do_skip_fortress)

    def deactivate_battle(self) -> IntentResult:
        return self._run("deactivate_battle", {}, self._do_deactivate_battle)

    def undo(self) -> IntentResult:
        return self._run("undo", {}, self._do_undo, record_history=False)

    def apply_territory_estimate(self, epoch: int, black: int, white: int) -> IntentResult:
        """Replace territory with a collaborator estimate computed for ``epoch``."""
        if epoch != self._epoch or self._game_over:
            logger.debug("dropping estimate for epoch %s (current %s)", epoch, self._epoch)
            return IntentResult(accepted=False, code=STALE_ESTIMATE, message="estimate no longer applies")

        self._territory = {BLACK: max(0, int(black)), WHITE: max(0, int(white))}
        message = f"territory estimate: black {self._territory[BLACK]}, white {self._territory[WHITE]}"
        params = {"epoch": epoch, "black": black, "white": white}
        return self._settle_territory("apply_territory_estimate", params, message)

    def fall_back_to_local_territory(self, epoch: int) -> IntentResult:
        """Settle ``epoch`` on the local flood-fill count after the collaborator failed."""
        if epoch != self._epoch or self._game_over:
            logger.debug("dropping fallback for epoch %s (current %s)", epoch, self._epoch)
            return IntentResult(accepted=False, code=STALE_ESTIMATE, message="estimate no longer applies")

        self._territory = self.strategic.compute_territory()
        message = f"local territory: black {self._territory[BLACK]}, white {self._territory[WHITE]}"
        return self._settle_territory("fall_back_to_local_territory", {"epoch": epoch}, message)

    # ------------------------------------------------------------------
    # Intent handlers
    # ------------------------------------------------------------------

    def _do_place_stone(self, row: int, col: int) -> _Change:
        if self.battle.is_fortress_pending():
            return self._do_place_fortress(row, col)
        if not self.battle.is_idle():
            raise WrongPhaseError("stones cannot be placed while a battle is active")

        color = self._strategic_turn
        outcome = self.strategic.place_stone(row, col, color)
        self._captured[color] += outcome.captured_count
        self._moves.append({"row": row, "col": col, "color": color, "kind": outcome.kind})
        self._strategic_turn = opponent(color)

        events = self._refresh_territory()
        message = f"{color} placed a stone at ({row}, {col})"
        if outcome.captured_count:
            message += f", capturing {outcome.captured_count}"
        data = {
            "row": row,
            "col": col,
            "color": color,
            "captured": [list(cell) for cell in outcome.captured],
        }
        return _Change(message=message, data=data, events=events, strategic_changed=True)

    def _do_place_fortress(self, row: int, col: int) -> _Change:
        if not self.battle.is_fortress_pending():
            raise WrongPhaseError("no fortress reward is pending")

        color = self.battle.winner
        if color is None:
            raise InvalidTransitionError("fortress reward has no battle winner")
        outcome = self.strategic.place_fortress(row, col, color)
        self._moves.append({"row": row, "col": col, "color": color, "kind": outcome.kind})
        self.tactical.clear()
        self.battle.finish()
        self._strategic_turn = opponent(self._strategic_turn)

        events = [_battle_event(BattlePhase.FORTRESS_PENDING, BattlePhase.IDLE, reason="fortress_placed")]
        events.extend(self._refresh_territory())
        logger.info("%s fortress placed at (%s, %s)", color, row, col)
        data = {"row": row, "col": col, "color": color, "kind": outcome.kind}
        return _Change(
            message=f"{color} built a fortress at ({row}, {col})",
            data=data,
            events=events,
            strategic_changed=True,
        )

    def _do_summon(self, piece_type: str, color: str | None) -> _Change:
        color = color or self._strategic_turn
        if color not in COLORS:
            raise IllegalPieceMoveError(f"unknown color: {color!r}")
        if piece_type not in PIECE_TYPES:
            raise IllegalPieceMoveError(f"unknown piece type: {piece_type!r}")
        if self.battle.phase not in (BattlePhase.IDLE, BattlePhase.ACTIVE):
            raise WrongPhaseError("pieces cannot be summoned until the fortress reward is settled")
        if piece_type == GENERAL and self.tactical.general_of(color) is not None:
            raise IllegalPieceMoveError(f"{color} already has a general on the board")

        started = self.battle.is_idle()
        placement = self.battle.summon(
            self.tactical,
            piece_type,
            color,
            tokens_available=self._tokens[color],
            rng=self._rng,
            max_attempts=self.config.summon_attempts,
        )
        self._tokens = self.economy.spend(self._tokens, color)

        events: list[dict[str, Any]] = []
        if started:
            self._tactical_turn = color
            events.append(_battle_event(BattlePhase.IDLE, BattlePhase.ACTIVE, participant=color))
            logger.info("battle started by %s", color)
        data = {"row": placement.row, "col": placement.col, "color": color, "piece_type": piece_type}
        return _Change(
            message=f"{color} summoned a {piece_type} at ({placement.row}, {placement.col})",
            data=data,
            events=events,
        )

    def _do_move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> _Change:
        if not self.battle.is_active():
            raise WrongPhaseError("no battle is active")

        color = self._tactical_turn
        outcome = self.tactical.move_piece(from_row, from_col, to_row, to_col, color)
        self._tactical_turn = opponent(color)

        events: list[dict[str, Any]] = []
        data: dict[str, Any] = {
            "from": [from_row, from_col],
            "to": [to_row, to_col],
            "color": color,
            "piece_type": outcome.piece.piece_type,
            "captured": None,
        }
        message = f"{color} {outcome.piece.piece_type} moved to ({to_row}, {to_col})"
        if outcome.captured is not None:
            data["captured"] = outcome.captured.piece_type
            message += f", capturing a {outcome.captured.piece_type}"
            winner = self.tactical.check_win_condition()
            if winner is not None:
                self.battle.resolve(winner)
                events.append(_battle_event(BattlePhase.ACTIVE, BattlePhase.RESOLVED, winner=winner))
                self.battle.grant_fortress()
                events.append(_battle_event(BattlePhase.RESOLVED, BattlePhase.FORTRESS_PENDING, winner=winner))
                data["battle_winner"] = winner
                message += f"; {winner} wins the battle and may place a fortress"
                logger.info("battle won by %s", winner)
        return _Change(message=message, data=data, events=events)

    def _do_skip_fortress(self) -> _Change:
        if not self.battle.is_fortress_pending():
            raise WrongPhaseError("no fortress reward is pending")
        winner = self.battle.winner
        self.tactical.clear()
        self.battle.finish()
        return _Change(
            message=f"{winner} skipped the fortress reward",
            events=[_battle_event(BattlePhase.FORTRESS_PENDING, BattlePhase.IDLE, reason="fortress_skipped")],
        )

    def _do_deactivate_battle(self) -> _Change:
        if not self.battle.is_active():
            raise WrongPhaseError("no battle is active")
        self.tactical.clear()
        self.battle.finish()
        logger.info("battle deactivated without a winner")
        return _Change(
            message="battle ended without a winner",
            events=[_battle_event(BattlePhase.ACTIVE, BattlePhase.IDLE, reason="deactivated")],
        )

    def _do_undo(self) -> _Change:
        snapshot = self.history.pop()
        self._restore_state(snapshot)
        return _Change(message="last move undone", strategic_changed=True, wants_estimate=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(
        self,
        intent: str,
        params: dict[str, Any],
        handler: Callable[[], _Change],
        *,
        record_history: bool = True,
    ) -> IntentResult:
        if self._game_over:
            exc = GameAlreadyOverError(f"game is over, {self._winner} won; start a new game")
            result = IntentResult(accepted=False, code=exc.code, message=exc.message)
            self._trace(intent, params, result)
            return result

        before = self._export_state()
        try:
            change = handler()
        except HybridGoError as exc:
            self._restore_state(before)
            logger.debug("%s rejected: %s (%s)", intent, exc.code, exc.message)
            result = IntentResult(accepted=False, code=exc.code, message=exc.message)
            self._trace(intent, params, result)
            return result

        if self._game_over:
            self.history.clear()
        elif record_history:
            self.history.push(before)
        self._version += 1
        if change.strategic_changed:
            self._epoch += 1

        result = IntentResult(accepted=True, message=change.message, data=change.data, events=change.events)
        self._trace(intent, params, result)
        self._notify(change.message, change.events)
        if change.strategic_changed and change.wants_estimate and not self._game_over:
            self._request_estimate()
        return result

    def _reset_fields(self) -> None:
        self._territory = empty_counts()
        self._tokens = empty_counts()
        self._captured = empty_counts()
        self._strategic_turn = BLACK
        self._tactical_turn = BLACK
        self._moves: list[dict[str, Any]] = []
        self._game_over = False
        self._winner: str | None = None

    def _refresh_territory(self) -> list[dict[str, Any]]:
        # With a collaborator wired the local count is provisional; only an
        # applied estimate (or an explicit fallback) may end the game.
        self._territory = self.strategic.compute_territory()
        events = self._merge_tokens()
        if self._estimate_sink is None:
            events.extend(self._check_territory_win())
        return events

    def _settle_territory(self, intent: str, params: dict[str, Any], message: str) -> IntentResult:
        events = self._merge_tokens()
        events.extend(self._check_territory_win())
        if self._game_over:
            self.history.clear()
        self._version += 1
        result = IntentResult(accepted=True, message=message, events=events)
        self._trace(intent, params, result)
        self._notify(message, events)
        return result

    def _merge_tokens(self) -> list[dict[str, Any]]:
        computed = self.economy.compute_tokens(self._territory, self._captured, self.strategic.center_occupant())
        self._tokens, grants = self.economy.merge(self._tokens, computed)
        for grant in grants:
            logger.info("%s tokens %s -> %s", grant.color, grant.old, grant.new)
        return [grant.to_event() for grant in grants]

    def _check_territory_win(self) -> list[dict[str, Any]]:
        for color in COLORS:
            if self._territory[color] >= self.config.win_territory:
                self._game_over = True
                self._winner = color
                logger.info("%s reached %s territory and wins", color, self._territory[color])
                return [{"type": "game_over", "winner": color, "territory": self._territory[color]}]
        return []

    def _export_state(self) -> dict[str, Any]:
        return {
            "version": self._version,
            "epoch": self._epoch,
            "strategic": {
                "stones": self.strategic.stones(),
                "territory": dict(self._territory),
                "tokens": dict(self._tokens),
                "captured": dict(self._captured),
                "current_player": self._strategic_turn,
                "moves": [dict(move) for move in self._moves],
            },
            "tactical": {
                "pieces": self.tactical.pieces(),
                "current_player": self._tactical_turn,
                "fielded_generals": sorted(self.tactical.fielded_generals),
            },
            "battle": self.battle.to_dict(),
            "game_over": self._game_over,
            "winner": self._winner,
        }

    def _restore_state(self, state: dict[str, Any]) -> None:
        strategic = state["strategic"]
        tactical = state["tactical"]
        self.strategic.restore(strategic["stones"])
        self.tactical.restore(tactical["pieces"], tactical.get("fielded_generals"))
        self.battle = BattleStateMachine.from_dict(state["battle"])
        self._territory = dict(strategic["territory"])
        self._tokens = dict(strategic["tokens"])
        self._captured = dict(strategic["captured"])
        self._strategic_turn = strategic["current_player"]
        self._tactical_turn = tactical["current_player"]
        self._moves = [dict(move) for move in strategic["moves"]]
        self._game_over = bool(state["game_over"])
        self._winner = state.get("winner")

    def _request_estimate(self) -> None:
        if self._estimate_sink is None:
            return
        self._estimate_sink(self._epoch, self.estimate_request())

    def _notify(self, message: str, events: list[dict[str, Any]]) -> None:
        if self._game_logger is not None:
            self._game_logger.write_state(self._version, self._export_state())
        if self._on_update is None:
            return
        self._on_update({"state": self.get_public_state(), "message": message, "events": list(events)})

    def _trace(self, intent: str, params: dict[str, Any], result: IntentResult) -> None:
        if self._game_logger is None:
            return
        self._game_logger.record_intent(
            intent,
            params,
            version=self._version,
            accepted=result.accepted,
            code=result.code,
        )
