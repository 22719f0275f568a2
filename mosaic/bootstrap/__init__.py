"""Composition root: builds the engine from its ports."""

from mosaic.bootstrap.engine import (
    GameEngine,
    build_engine,
    build_strategy_registry,
    get_engine,
    reset_engine,
    set_engine,
)

__all__ = [
    "GameEngine",
    "build_engine",
    "build_strategy_registry",
    "get_engine",
    "reset_engine",
    "set_engine",
]
