"""Backend em memória com expiração por entrada."""

import logging
import time
from collections.abc import Callable
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class MemoryCache:
    """Cache em memória, thread-safe, com TTL opcional por entrada.

    Útil para desenvolvimento, testes e como cache local de processo.
    Entradas expiradas são removidas na leitura.

    Attributes:
        clock: Função que retorna o tempo atual em segundos
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Inicializa o cache.

        Args:
            clock: Fonte de tempo monotônica (injetável para testes)
        """
        self.clock = clock
        self._lock = Lock()
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def read(self, key: str) -> Any | None:
        """Busca valor do cache.

        Args:
            key: Chave do cache

        Returns:
            Valor ou None se ausente/expirado
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at is not None and self.clock() >= expires_at:
                del self._entries[key]
                logger.debug("Entrada expirada para chave: %s", key)
                return None
            return value

    def write(self, key: str, value: Any, expires_in: float | None = None) -> None:
        """Armazena valor no cache.

        Args:
            key: Chave do cache
            value: Valor a armazenar
            expires_in: Tempo de vida em segundos (None para sem expiração)
        """
        expires_at = None if expires_in is None else self.clock() + expires_in
        with self._lock:
            self._entries[key] = (value, expires_at)

    def clear(self) -> None:
        """Remove todas as entradas."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
