"""Shared fixtures for service tests."""

from __future__ import annotations

from collections.abc import Callable
import json
from typing import Any

import httpx
import pytest

from hybridgo_service.core.config import Settings

ESTIMATOR_URL = "http://estimator.test"


@pytest.fixture
def settings() -> Settings:
    """Fast settings pointing at a mocked estimator."""
    return Settings(
        hybridgo_estimator_url=ESTIMATOR_URL,
        hybridgo_estimate_timeout_seconds=1.0,
        hybridgo_dispatch_interval_seconds=0.01,
    )


@pytest.fixture
def estimator_transport() -> Callable[..., tuple[httpx.MockTransport, list[dict[str, Any]]]]:
    """Build a MockTransport answering estimate/health calls; returns it with the captured request bodies."""

    def build(
        *,
        territories: dict[str, int] | None = None,
        status_code: int = 200,
        body: Any = None,
        katago_running: bool = True,
    ) -> tuple[httpx.MockTransport, list[dict[str, Any]]]:
        seen: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/health":
                return httpx.Response(200, json={"status": "ok", "katagoRunning": katago_running})
            seen.append(json.loads(request.content))
            if body is not None:
                return httpx.Response(status_code, content=body if isinstance(body, bytes) else json.dumps(body))
            payload = {"territories": territories or {"black": 0, "white": 0, "dame": 361}}
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler), seen

    return build
