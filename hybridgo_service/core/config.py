"""Runtime settings for the game service and its estimation collaborator."""

from __future__ import annotations

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings

from hybridgo.constants import (
    DEFAULT_CAPTURES_PER_TOKEN,
    DEFAULT_CENTER_BONUS,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SUMMON_ATTEMPTS,
    DEFAULT_TERRITORY_PER_TOKEN,
    DEFAULT_WIN_TERRITORY,
)
from hybridgo.core import RuleConfig


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    hybridgo_territory_per_token: int = Field(default=DEFAULT_TERRITORY_PER_TOKEN, ge=1)
    hybridgo_captures_per_token: int = Field(default=DEFAULT_CAPTURES_PER_TOKEN, ge=1)
    hybridgo_center_bonus: int = Field(default=DEFAULT_CENTER_BONUS, ge=0)
    hybridgo_win_territory: int = Field(default=DEFAULT_WIN_TERRITORY, ge=1)
    hybridgo_history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    hybridgo_summon_attempts: int = Field(default=DEFAULT_SUMMON_ATTEMPTS, ge=1)

    hybridgo_estimator_url: str = "http://localhost:3000"
    hybridgo_estimator_enabled: bool = True
    hybridgo_estimate_timeout_seconds: float = Field(default=5.0, gt=0)
    hybridgo_dispatch_interval_seconds: float = Field(default=0.1, gt=0)

    hybridgo_trace_dir: str | None = None

    @model_validator(mode="after")
    def validate_dispatch_interval(self) -> "Settings":
        """Ensure the channel liveness timeout is smaller than the request timeout."""
        if self.hybridgo_dispatch_interval_seconds >= self.hybridgo_estimate_timeout_seconds:
            raise ValueError(
                "HYBRIDGO_DISPATCH_INTERVAL_SECONDS must be less than "
                "HYBRIDGO_ESTIMATE_TIMEOUT_SECONDS"
            )
        return self

    def rule_config(self) -> RuleConfig:
        return RuleConfig(
            territory_per_token=self.hybridgo_territory_per_token,
            captures_per_token=self.hybridgo_captures_per_token,
            center_bonus=self.hybridgo_center_bonus,
            win_territory=self.hybridgo_win_territory,
            history_limit=self.hybridgo_history_limit,
            summon_attempts=self.hybridgo_summon_attempts,
        )


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
