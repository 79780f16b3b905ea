"""Protocols para extensibilidade da biblioteca.

Define interfaces que permitem implementações customizadas de:
- CacheBackend: Storage envolvido pelo proxy
- FailureNotifier: Canal que recebe eventos de falha
- EventListener: Consumidor de eventos registrado no Notifier
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol para backends de cache.

    Qualquer objeto com ``read`` e ``write`` compatíveis pode ser
    envolvido pelo ``FaultTolerantProxy``. Ambos os métodos podem
    levantar exceções livremente.

    Example:
        ```python
        class DictCache:
            def __init__(self):
                self._data = {}

            def read(self, key):
                return self._data.get(key)

            def write(self, key, value, expires_in=None):
                self._data[key] = value
        ```
    """

    def read(self, key: str) -> Any | None:
        """Lê valor do cache.

        Args:
            key: Chave do cache

        Returns:
            Valor armazenado ou None se não encontrado

        Raises:
            Exception: Se o backend falhar
        """
        ...

    def write(self, key: str, value: Any, expires_in: float | None = None) -> None:
        """Escreve valor no cache.

        Args:
            key: Chave do cache
            value: Valor a armazenar
            expires_in: Tempo de vida em segundos (None para sem expiração)

        Raises:
            Exception: Se o backend falhar
        """
        ...


@runtime_checkable
class FailureNotifier(Protocol):
    """Protocol para o canal de notificação de falhas.

    Example:
        ```python
        class PrintNotifier:
            def notify(self, event, payload):
                print(event, dict(payload))
        ```
    """

    def notify(self, event: str, payload: Mapping[str, Any]) -> None:
        """Recebe um evento de falha.

        Args:
            event: Tipo do evento (ex: "cache_failure")
            payload: Atributos do evento (key, action, error)
        """
        ...


@runtime_checkable
class EventListener(Protocol):
    """Protocol para listeners registrados no ``Notifier``."""

    def handle(self, event: str, payload: Mapping[str, Any]) -> None:
        """Processa um evento.

        Args:
            event: Tipo do evento
            payload: Atributos do evento
        """
        ...
