"""
Infrastructure layer - adapters for the Mosaic engine.

This layer contains:
- Secure randomness and system clock adapters
- In-memory stubs of the persistence, event-log and notification ports
- structlog configuration

IMPORT RULES:
- CAN import from: domain, application, config
- Implements ports defined in the application layer
"""
