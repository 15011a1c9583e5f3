"""Wire one game orchestrator to the estimation collaborator."""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from hybridgo.core import GameOrchestrator, IntentResult, UpdateCallback
from hybridgo.game_logger import GameLogger
from hybridgo_service.core.config import Settings
from hybridgo_service.core.config import load_settings
from hybridgo_service.estimation import EstimationChannel
from hybridgo_service.estimation import EstimationClient
from hybridgo_service.estimation import TerritoryEstimate

logger = logging.getLogger(__name__)


class GameRuntime:
    """Owns the orchestrator, the estimation client and the channel between them.

    Local territory is provisional while the estimator is enabled. A late
    estimate settles it only for the orchestrator's current epoch; a failed
    one settles that epoch on the local count instead.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        rng: random.Random | None = None,
        on_update: UpdateCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        game_logger = GameLogger(self.settings.hybridgo_trace_dir) if self.settings.hybridgo_trace_dir else None

        self.client = EstimationClient(
            self.settings.hybridgo_estimator_url,
            timeout_seconds=self.settings.hybridgo_estimate_timeout_seconds,
            transport=transport,
        )
        self.channel = EstimationChannel(
            self.client,
            self._apply_estimate,
            dispatch_interval_seconds=self.settings.hybridgo_dispatch_interval_seconds,
            response_timeout_seconds=self.settings.hybridgo_estimate_timeout_seconds,
        )
        sink = self.channel.submit if self.settings.hybridgo_estimator_enabled else None
        self.game = GameOrchestrator(
            self.settings.rule_config(),
            rng=rng,
            on_update=on_update,
            estimate_sink=sink,
            game_logger=game_logger,
        )
        self.applied_estimates: list[IntentResult] = []

    @property
    def engine_alive(self) -> bool:
        return self.client.engine_alive

    async def start(self) -> None:
        """Probe the collaborator and start the background channel worker."""
        if not self.settings.hybridgo_estimator_enabled:
            return
        alive = await self.client.check_health()
        if not alive:
            logger.warning("estimation engine at %s is not running", self.settings.hybridgo_estimator_url)
        self.channel.start()

    async def stop(self) -> None:
        await self.channel.stop()
        await self.client.aclose()

    async def settle(self) -> None:
        """Deliver every pending estimate before returning."""
        await self.channel.drain()

    def _apply_estimate(self, epoch: int, estimate: TerritoryEstimate) -> None:
        if estimate.ok:
            result = self.game.apply_territory_estimate(epoch, estimate.black, estimate.white)
        else:
            logger.info("estimate failed, settling epoch %s on local territory", epoch)
            result = self.game.fall_back_to_local_territory(epoch)
        self.applied_estimates.append(result)

    def public_state(self) -> dict[str, Any]:
        state = self.game.get_public_state()
        state["engine_alive"] = self.engine_alive
        return state
