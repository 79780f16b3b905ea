"""Proxy tolerante a falhas para backends de cache."""

import logging
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

from .events import CACHE_FAILURE, CacheAction, FailureEvent
from .exceptions import ConfigurationError, is_recoverable
from .options import ProxyOptions
from .protocols import CacheBackend

logger = logging.getLogger(__name__)


class FaultTolerantProxy:
    """Wrapper para backends de cache que podem levantar erros.

    Qualquer erro de aplicação levantado pelo backend é capturado e
    enviado ao notifier. Leituras com falha retornam None e escritas
    com falha são descartadas. Falhas fatais de processo
    (``MemoryError``, ``RecursionError``, ``KeyboardInterrupt``...)
    propagam sem modificação.

    O proxy não guarda estado além das duas referências recebidas na
    construção, então pode ser compartilhado entre threads desde que
    backend e notifier também possam.

    Example:
        ```python
        from faulty_cache import FaultTolerantProxy, LogListener, Notifier

        cache = FaultTolerantProxy(redis_cache, notifier=Notifier([LogListener()]))
        cache.write("user:1", data, expires_in=60)
        cache.read("user:1")
        ```
    """

    def __init__(
        self,
        cache: CacheBackend,
        options: ProxyOptions | None = None,
        *,
        configure: Callable[[SimpleNamespace], None] | None = None,
        **values: Any,
    ) -> None:
        """Inicializa o proxy.

        Args:
            cache: Backend de cache a envolver
            options: Opções prontas (exclusivo com configure/values)
            configure: Callback para ajustar as opções antes de congelá-las
            **values: Valores das opções (ex: notifier=...)

        Raises:
            ConfigurationError: Se o notifier não for fornecido
        """
        if options is not None and (configure is not None or values):
            raise ConfigurationError("options não pode ser combinado com configure ou valores avulsos")

        self._cache = cache
        self._options = options if options is not None else ProxyOptions.build(configure, **values)

    @property
    def cache(self) -> CacheBackend:
        """Backend envolvido."""
        return self._cache

    @property
    def options(self) -> ProxyOptions:
        """Opções do proxy."""
        return self._options

    def read(self, key: str) -> Any | None:
        """Lê do cache com segurança.

        Args:
            key: Chave do cache

        Returns:
            Valor encontrado, ou None se ausente ou se o backend falhar
        """
        try:
            return self._cache.read(key)
        except Exception as e:
            if not is_recoverable(e):
                raise
            self._notify_failure(key, CacheAction.READ, e)
            return None

    def write(self, key: str, value: Any, expires_in: float | None = None) -> None:
        """Escreve no cache com segurança.

        Se o backend falhar a escrita é ignorada.

        Args:
            key: Chave do cache
            value: Valor a armazenar
            expires_in: Tempo de vida em segundos (None para sem expiração)
        """
        try:
            self._cache.write(key, value, expires_in=expires_in)
        except Exception as e:
            if not is_recoverable(e):
                raise
            self._notify_failure(key, CacheAction.WRITE, e)

    def _notify_failure(self, key: str, action: CacheAction, error: Exception) -> None:
        logger.debug("Falha contida no %s da chave %r: %s", action.value, key, error)
        event = FailureEvent(key=key, action=action, error=error)
        self._options.notifier.notify(CACHE_FAILURE, event.payload())  # type: ignore[union-attr]
