"""Backend nulo: nunca armazena nada."""

from typing import Any


class NullCache:
    """Cache que descarta escritas e sempre retorna miss.

    Útil para desabilitar cache sem mudar o código que o consome.
    """

    def read(self, key: str) -> None:
        """Sempre retorna None (miss)."""
        return None

    def write(self, key: str, value: Any, expires_in: float | None = None) -> None:
        """Descarta a escrita."""
