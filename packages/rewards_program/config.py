"""Configuration models for the rewards engine, pagination and the HTTP app.

Tier thresholds and rates are plain data so alternate programs can be tested
without touching the engine. ``load_settings`` reads the process environment;
the CLI loads ``.env`` (via ``python-dotenv``) before calling it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RewardsConfig(BaseModel):
    """Tier boundaries and per-dollar rates for the points formula."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    points_per_dollar_over_100: float = Field(default=2, ge=0)
    points_per_dollar_50_to_100: float = Field(default=1, ge=0)
    threshold_50: float = Field(default=50, ge=0)
    threshold_100: float = Field(default=100, ge=0)

    @model_validator(mode="after")
    def _thresholds_ordered(self) -> RewardsConfig:
        if self.threshold_50 > self.threshold_100:
            raise ValueError("threshold_50 must not exceed threshold_100")
        return self


class PaginationConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    items_per_page: int = Field(default=10, ge=1)
    max_pages_display: int = Field(default=5, ge=1)


class AppSettings(BaseModel):
    """Runtime settings for the server and CLI."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_path: Path = Path("data") / "transactions.json"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=0, le=65535)
    # Artificial latency applied to API responses, in milliseconds.
    api_delay_ms: int = Field(default=500, ge=0)
    public_dir: Path | None = None
    # Level name for run_server; None defers to REWARDS_LOG_LEVEL, then INFO.
    log_level: str | None = None
    rewards: RewardsConfig = RewardsConfig()
    pagination: PaginationConfig = PaginationConfig()


DEFAULT_REWARDS_CONFIG = RewardsConfig()
DEFAULT_PAGINATION_CONFIG = PaginationConfig()


def _env(*names: str) -> str | None:
    for name in names:
        val = os.getenv(name)
        if val is not None and val.strip():
            return val.strip()
    return None


def load_settings(**overrides: Any) -> AppSettings:
    """Build :class:`AppSettings` from the environment plus explicit overrides.

    Recognized variables: ``REWARDS_DATA_PATH``, ``REWARDS_HOST``,
    ``REWARDS_PORT`` (or ``PORT``), ``REWARDS_API_DELAY_MS``,
    ``REWARDS_PUBLIC_DIR``, ``REWARDS_LOG_LEVEL``, ``REWARDS_ITEMS_PER_PAGE`` and
    ``REWARDS_MAX_PAGES_DISPLAY``. Keyword overrides whose value is ``None``
    are ignored so CLI options can be passed through unconditionally.
    """

    values: dict[str, Any] = {}
    env_map = {
        "data_path": ("REWARDS_DATA_PATH",),
        "host": ("REWARDS_HOST",),
        "port": ("REWARDS_PORT", "PORT"),
        "api_delay_ms": ("REWARDS_API_DELAY_MS",),
        "public_dir": ("REWARDS_PUBLIC_DIR",),
        "log_level": ("REWARDS_LOG_LEVEL",),
    }
    for field, names in env_map.items():
        val = _env(*names)
        if val is not None:
            values[field] = val

    pagination: dict[str, Any] = {}
    per_page = _env("REWARDS_ITEMS_PER_PAGE")
    if per_page is not None:
        pagination["items_per_page"] = per_page
    max_display = _env("REWARDS_MAX_PAGES_DISPLAY")
    if max_display is not None:
        pagination["max_pages_display"] = max_display
    if pagination:
        values["pagination"] = PaginationConfig.model_validate(pagination)

    values.update({k: v for k, v in overrides.items() if v is not None})
    return AppSettings.model_validate(values)


__all__ = [
    "AppSettings",
    "DEFAULT_PAGINATION_CONFIG",
    "DEFAULT_REWARDS_CONFIG",
    "PaginationConfig",
    "RewardsConfig",
    "load_settings",
]
