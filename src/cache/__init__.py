"""Cache package for the source fetch gateway.

Exports:
- ``TwoTierCache`` -- primary + stale payload cache over a state backend
- ``STALE_TTL`` -- default lifetime of the stale slot (seconds)
"""

from src.cache.two_tier import STALE_TTL, TwoTierCache

__all__ = ["STALE_TTL", "TwoTierCache"]
