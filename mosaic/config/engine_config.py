"""Engine-wide configuration.

Process-level defaults that apply to every game unless its own settings
override them. Per-game settings live in GameSettings.

Environment Variables:
- MOSAIC_DEFAULT_RESOLUTION_METHOD: Strategy used when a game names none
  (default: token_draw)
- MOSAIC_DEFAULT_ARGUMENT_LIMIT: Arguments per player per action
  (default: 3, min: 1, max: 10)
- MOSAIC_NOTIFICATION_DRAIN_TIMEOUT_SECONDS: How long shutdown waits for
  in-flight notifications (default: 5, min: 0, max: 60)
- MOSAIC_ENVIRONMENT: development | production | test (default: development)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


DEFAULT_RESOLUTION_METHOD = "token_draw"

DEFAULT_ARGUMENT_LIMIT = 3
MIN_ARGUMENT_LIMIT = 1
MAX_ARGUMENT_LIMIT = 10

DEFAULT_NOTIFICATION_DRAIN_TIMEOUT_SECONDS = 5
MAX_NOTIFICATION_DRAIN_TIMEOUT_SECONDS = 60

# Phase timeouts are hours; -1 disables the timeout
TIMEOUT_DISABLED = -1
MAX_TIMEOUT_HOURS = 168

ENVIRONMENTS = frozenset({"development", "production", "test"})


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for the Mosaic engine.

    Attributes:
        default_resolution_method: Strategy id for games without one.
        default_argument_limit: Per-player argument limit default.
        notification_drain_timeout_seconds: Shutdown wait for notifications.
        environment: Deployment environment; selects the log renderer.
    """

    default_resolution_method: str = DEFAULT_RESOLUTION_METHOD
    default_argument_limit: int = DEFAULT_ARGUMENT_LIMIT
    notification_drain_timeout_seconds: int = DEFAULT_NOTIFICATION_DRAIN_TIMEOUT_SECONDS
    environment: str = "development"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.default_resolution_method:
            raise ValueError("default_resolution_method must not be empty")
        if not MIN_ARGUMENT_LIMIT <= self.default_argument_limit <= MAX_ARGUMENT_LIMIT:
            raise ValueError(
                f"default_argument_limit must be between {MIN_ARGUMENT_LIMIT} "
                f"and {MAX_ARGUMENT_LIMIT}, got {self.default_argument_limit}"
            )
        if not 0 <= self.notification_drain_timeout_seconds <= MAX_NOTIFICATION_DRAIN_TIMEOUT_SECONDS:
            raise ValueError(
                "notification_drain_timeout_seconds must be between 0 and "
                f"{MAX_NOTIFICATION_DRAIN_TIMEOUT_SECONDS}, "
                f"got {self.notification_drain_timeout_seconds}"
            )
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(ENVIRONMENTS)}, got {self.environment!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> EngineConfig:
        """Create config from environment variables with defaults.

        Out-of-range integers are clamped; an unknown environment name falls
        back to development.

        Returns:
            EngineConfig with values from environment or defaults.
        """
        method = os.environ.get("MOSAIC_DEFAULT_RESOLUTION_METHOD") or DEFAULT_RESOLUTION_METHOD

        argument_limit = _get_int_env("MOSAIC_DEFAULT_ARGUMENT_LIMIT", DEFAULT_ARGUMENT_LIMIT)
        # Clamp to valid range
        argument_limit = max(MIN_ARGUMENT_LIMIT, min(argument_limit, MAX_ARGUMENT_LIMIT))

        drain_timeout = _get_int_env(
            "MOSAIC_NOTIFICATION_DRAIN_TIMEOUT_SECONDS",
            DEFAULT_NOTIFICATION_DRAIN_TIMEOUT_SECONDS,
        )
        drain_timeout = max(0, min(drain_timeout, MAX_NOTIFICATION_DRAIN_TIMEOUT_SECONDS))

        environment = os.environ.get("MOSAIC_ENVIRONMENT", "development").lower()
        if environment not in ENVIRONMENTS:
            environment = "development"

        return cls(
            default_resolution_method=method,
            default_argument_limit=argument_limit,
            notification_drain_timeout_seconds=drain_timeout,
            environment=environment,
        )


# Default production-ready config
DEFAULT_ENGINE_CONFIG = EngineConfig()

# Testing config: no drain wait
TEST_ENGINE_CONFIG = EngineConfig(
    notification_drain_timeout_seconds=0,
    environment="test",
)
