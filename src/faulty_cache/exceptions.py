"""Exceções do faulty-cache e classificação de falhas recuperáveis."""


class FaultyCacheError(Exception):
    """Erro base para o faulty-cache."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class ConfigurationError(FaultyCacheError, ValueError):
    """Configuração inválida detectada na construção (ex: notifier ausente)."""

    pass


class CacheBackendError(FaultyCacheError):
    """Erro base levantado pelos backends de cache."""

    pass


class CacheConnectionError(CacheBackendError):
    """Erro de conexão com o storage do backend."""

    pass


class CacheTimeoutError(CacheBackendError):
    """Operação no backend excedeu o timeout."""

    pass


class CacheSerializationError(CacheBackendError):
    """Erro de serialização/deserialização de dados."""

    pass


class CacheKeyError(CacheBackendError):
    """Erro relacionado à chave de cache (vazia, inválida, etc.)."""

    pass


# Falhas de processo que nunca são contidas, mesmo sendo subclasses de Exception.
# BaseException fora de Exception (KeyboardInterrupt, SystemExit, ...) já fica de fora.
FATAL_ERRORS: tuple[type[BaseException], ...] = (MemoryError, RecursionError)


def is_recoverable(error: BaseException) -> bool:
    """Indica se um erro do backend deve ser contido pelo proxy.

    Args:
        error: Exceção levantada pelo backend

    Returns:
        True para erros de aplicação, False para falhas fatais de processo
    """
    return isinstance(error, Exception) and not isinstance(error, FATAL_ERRORS)
