"""Serialized, debounced delivery of estimation requests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import contextlib
import logging
from typing import Any, Protocol

from hybridgo_service.estimation.client import FALLBACK_ESTIMATE, TerritoryEstimate

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, TerritoryEstimate], None]


class SupportsEstimate(Protocol):
    async def estimate(self, request: dict[str, Any]) -> TerritoryEstimate: ...


class EstimationChannel:
    """One request in flight at a time; newer submissions replace older pending ones."""

    def __init__(
        self,
        client: SupportsEstimate,
        on_result: ResultCallback,
        *,
        dispatch_interval_seconds: float = 0.1,
        response_timeout_seconds: float = 5.0,
    ) -> None:
        self._client = client
        self._on_result = on_result
        self._dispatch_interval_seconds = dispatch_interval_seconds
        self._response_timeout_seconds = response_timeout_seconds
        self._pending: tuple[int, dict[str, Any]] | None = None
        self._wakeup = asyncio.Event()
        self._worker: asyncio.Task[None] | None = None
        self.dispatched = 0
        self.superseded = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, epoch: int, request: dict[str, Any]) -> None:
        if self._pending is not None:
            self.superseded += 1
            logger.debug("estimate for epoch %s superseded by epoch %s", self._pending[0], epoch)
        self._pending = (epoch, request)
        self._wakeup.set()

    async def drain(self) -> None:
        """Dispatch whatever is pending, including requests submitted meanwhile."""
        while self._pending is not None:
            await self._dispatch_next()

    def start(self) -> None:
        if self.running:
            return
        self._worker = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def _run(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()
            while self._pending is not None:
                await self._dispatch_next()
                await asyncio.sleep(self._dispatch_interval_seconds)

    async def _dispatch_next(self) -> None:
        if self._pending is None:
            return
        epoch, request = self._pending
        self._pending = None
        self.dispatched += 1
        try:
            estimate = await asyncio.wait_for(
                self._client.estimate(request),
                timeout=self._response_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "estimation engine gave no answer within %.2fs (epoch %s)",
                self._response_timeout_seconds,
                epoch,
            )
            estimate = FALLBACK_ESTIMATE
        self._on_result(epoch, estimate)
