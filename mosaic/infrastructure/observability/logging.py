"""structlog setup for the engine.

Production renders one JSON object per line; every other environment uses
the console renderer. A production entry looks like::

    {"event": "action_resolved", "level": "info",
     "timestamp": "2026-01-01T00:00:00Z", "game_id": "...", "result_type": "TRIUMPH"}

Call ``configure_structlog`` once at startup. Modules log through
``structlog.get_logger(__name__)``.
"""

import logging
import os

import structlog
from structlog.typing import Processor

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Read ``LOG_LEVEL``; unknown names fall back to INFO."""
    name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def build_processors(environment: str) -> list[Processor]:
    """Return the processor chain for ``environment``."""
    renderer: Processor
    if environment == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=environment == "development")

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_structlog(environment: str = "production") -> None:
    """Install the engine's structlog configuration.

    Args:
        environment: ``production`` for JSON lines; anything else gets the
            console renderer (colored only in ``development``).
    """
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_game_context(game_id: str, user_id: str | None = None) -> None:
    """Attach the game (and acting user) to every entry of the current task.

    Call ``structlog.contextvars.clear_contextvars()`` when the request ends.
    """
    context = {"game_id": game_id}
    if user_id is not None:
        context["user_id"] = user_id
    structlog.contextvars.bind_contextvars(**context)
