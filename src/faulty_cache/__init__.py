"""faulty-cache: Proxy tolerante a falhas para backends de cache.

Envolve qualquer backend com ``read``/``write`` e garante que falhas do
backend nunca cheguem ao chamador: leituras viram miss (None), escritas
são descartadas, e cada falha é enviada uma única vez ao notifier.

Uso básico:
    ```python
    from faulty_cache import FaultTolerantProxy, LogListener, Notifier
    from faulty_cache.backends import DaprStateCache

    notifier = Notifier([LogListener()])
    cache = FaultTolerantProxy(DaprStateCache("cache"), notifier=notifier)

    cache.write("user:123", {"name": "Ana"}, expires_in=300)
    cache.read("user:123")  # None se o sidecar estiver fora
    ```

Com métricas OpenTelemetry:
    ```python
    from faulty_cache import Notifier, OpenTelemetryListener

    notifier = Notifier([LogListener(), OpenTelemetryListener()])
    ```
"""

__version__ = "0.1.0"

# Backends
from .backends import DaprStateCache, MemoryCache, NullCache

# Codificação de valores
from .codec import MsgPackBase64Codec, ValueCodec

# Eventos
from .events import CACHE_FAILURE, CacheAction, FailureEvent, Notifier

# Exceções
from .exceptions import (
    FATAL_ERRORS,
    CacheBackendError,
    CacheConnectionError,
    CacheKeyError,
    CacheSerializationError,
    CacheTimeoutError,
    ConfigurationError,
    FaultyCacheError,
    is_recoverable,
)

# Listeners
from .listeners import CallbackListener, LogListener, OpenTelemetryListener
from .options import ProxyOptions

# Protocols (para extensibilidade)
from .protocols import CacheBackend, EventListener, FailureNotifier

# Proxy principal
from .proxy import FaultTolerantProxy

__all__ = [
    # Proxy principal
    "FaultTolerantProxy",
    "ProxyOptions",
    # Eventos
    "CACHE_FAILURE",
    "CacheAction",
    "FailureEvent",
    "Notifier",
    # Listeners
    "CallbackListener",
    "LogListener",
    "OpenTelemetryListener",
    # Backends
    "DaprStateCache",
    "MemoryCache",
    "NullCache",
    # Codificação de valores
    "MsgPackBase64Codec",
    "ValueCodec",
    # Exceções
    "FATAL_ERRORS",
    "FaultyCacheError",
    "ConfigurationError",
    "CacheBackendError",
    "CacheConnectionError",
    "CacheTimeoutError",
    "CacheSerializationError",
    "CacheKeyError",
    "is_recoverable",
    # Protocols
    "CacheBackend",
    "EventListener",
    "FailureNotifier",
]
