"""HTTP client for the external territory-estimation engine."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx

from hybridgo_service.estimation.ownership import count_ownership

logger = logging.getLogger(__name__)

ESTIMATE_PATH = "/api/estimate-territory"
HEALTH_PATH = "/health"


@dataclass(frozen=True, slots=True)
class TerritoryEstimate:
    """Collaborator answer; ``ok`` is False when the zeroed fallback was substituted."""

    black: int = 0
    white: int = 0
    dame: int = 0
    ok: bool = False

    def to_dict(self) -> dict[str, int]:
        return {"black": self.black, "white": self.white, "dame": self.dame}


FALLBACK_ESTIMATE = TerritoryEstimate()


class EstimationError(Exception):
    """Malformed estimation payload."""


def parse_estimate(payload: Any) -> TerritoryEstimate:
    """Read ``territories`` when present, otherwise threshold raw ``ownership`` values."""
    if not isinstance(payload, dict):
        raise EstimationError("estimation response must be an object")

    territories = payload.get("territories")
    if isinstance(territories, dict):
        try:
            counts = {key: int(territories.get(key, 0)) for key in ("black", "white", "dame")}
        except (TypeError, ValueError) as exc:
            raise EstimationError("territories must hold integer counts") from exc
        if any(value < 0 for value in counts.values()):
            raise EstimationError("territories must not be negative")
        return TerritoryEstimate(**counts, ok=True)

    ownership = payload.get("ownership")
    if isinstance(ownership, list):
        try:
            values = [float(value) for value in ownership]
        except (TypeError, ValueError) as exc:
            raise EstimationError("ownership must hold numbers") from exc
        return TerritoryEstimate(**count_ownership(values), ok=True)

    raise EstimationError("estimation response has neither territories nor ownership")


class EstimationClient:
    """Best-effort client: every failure degrades to :data:`FALLBACK_ESTIMATE`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )
        self._engine_alive = False

    @property
    def engine_alive(self) -> bool:
        return self._engine_alive

    async def estimate(self, request: dict[str, Any]) -> TerritoryEstimate:
        try:
            response = await self._client.post(ESTIMATE_PATH, json=request)
            response.raise_for_status()
            estimate = parse_estimate(response.json())
        except (httpx.HTTPError, ValueError, EstimationError) as exc:
            logger.warning("territory estimation failed: %s", exc)
            return FALLBACK_ESTIMATE
        return estimate

    async def check_health(self) -> bool:
        """Refresh :attr:`engine_alive` from ``GET /health``."""
        try:
            response = await self._client.get(HEALTH_PATH)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("estimation health check failed: %s", exc)
            self._engine_alive = False
            return False

        alive = (
            isinstance(payload, dict)
            and payload.get("status") == "ok"
            and payload.get("katagoRunning") is True
        )
        self._engine_alive = alive
        return alive

    async def aclose(self) -> None:
        await self._client.aclose()
