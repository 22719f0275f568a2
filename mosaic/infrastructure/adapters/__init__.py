"""Production adapters for the Mosaic application ports."""

from mosaic.infrastructure.adapters.secure_randomness import SecureRandomness
from mosaic.infrastructure.adapters.system_time_authority import SystemTimeAuthority

__all__: list[str] = ["SecureRandomness", "SystemTimeAuthority"]
