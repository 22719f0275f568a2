"""
Application layer - orchestration of the Mosaic game engine.

This layer contains:
- Ports (protocols implemented by infrastructure)
- DTOs (validated inputs, settings and service results)
- Services (action, arbiter, round, setup and timeout orchestration)
- Resolution strategies and their registry

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, bootstrap
"""
