"""Observability infrastructure: structured logging.

Usage:
    from mosaic.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")
"""

from mosaic.infrastructure.observability.logging import (
    bind_game_context,
    build_processors,
    configure_structlog,
)

__all__: list[str] = [
    "bind_game_context",
    "build_processors",
    "configure_structlog",
]
