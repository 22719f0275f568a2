"""Domain layer for the Mosaic engine.

Contains entities, value objects, domain errors, event type constants and
pure domain services. Nothing in this package depends on infrastructure.
"""
