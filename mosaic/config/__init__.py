"""Configuration module for the Mosaic engine.

Available Configurations:
- EngineConfig: Process-level defaults for resolution and notifications
"""

from mosaic.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    TEST_ENGINE_CONFIG,
    EngineConfig,
)

__all__ = [
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "TEST_ENGINE_CONFIG",
]
