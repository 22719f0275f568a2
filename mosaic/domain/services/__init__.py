"""Pure domain services: acting-unit counting and the phase state machine."""
