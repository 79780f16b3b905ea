"""
Cache backend implementations.

Reference backends honouring the ``CacheBackend`` protocol. They raise
on failure; wrap them with ``FaultTolerantProxy`` to contain errors.
"""

from .dapr import DEFAULT_TIMEOUT_SECONDS, DaprStateCache
from .memory import MemoryCache
from .null import NullCache

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DaprStateCache",
    "MemoryCache",
    "NullCache",
]
