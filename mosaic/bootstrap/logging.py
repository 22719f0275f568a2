"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from mosaic.config import EngineConfig
from mosaic.infrastructure.observability import configure_structlog as _configure_structlog


def configure_structlog(config: EngineConfig) -> None:
    """Configure structlog for the config's environment."""
    _configure_structlog(environment=config.environment)


__all__ = ["configure_structlog"]
