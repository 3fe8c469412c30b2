"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HASH_SIZE_BYTES = 32
EVENT_ID_SIZE_BYTES = HASH_SIZE_BYTES
THREAD_COUNT = 32


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class EventLimitsConfig(BaseModel):
    max_event_data_size: int = 50_000  # bytes of UTF-8 payload
    max_call_stack_depth: int = 16
    thread_count: int = THREAD_COUNT

    @field_validator("thread_count")
    @classmethod
    def _thread_count_fits_u8(cls, v: int) -> int:
        if not 0 < v <= 256:
            raise ValueError("thread_count must be in 1..256")
        return v


class EventStoreConfig(BaseModel):
    max_events: int = 10_000
    path: str | None = None  # JSONL file; in-memory only when unset


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    limits: EventLimitsConfig = Field(default_factory=EventLimitsConfig)
    store: EventStoreConfig = Field(default_factory=EventStoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "SC_EVENTS_", "env_nested_delimiter": "__"}

    def validate_limits(self) -> None:
        """Reject limits that would make every event invalid."""
        from .errors import ConfigError

        if self.limits.max_event_data_size <= 0:
            raise ConfigError("limits.max_event_data_size must be positive.")
        if self.limits.max_call_stack_depth <= 0:
            raise ConfigError("limits.max_call_stack_depth must be positive.")
        if self.store.max_events <= 0:
            raise ConfigError("store.max_events must be positive.")


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    settings = Settings(**data)
    settings.validate_limits()
    return settings
