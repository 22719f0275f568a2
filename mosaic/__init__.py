"""
Mosaic - turn-based matrix game engine

Players propose actions, argue for and against them, then vote or submit
to an arbiter. Outcomes are resolved through pluggable randomized
strategies and the game advances through a round-based phase machine.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
