"""Backend para Dapr State Store via API HTTP do sidecar."""

import logging
import math
import os
from threading import Lock
from typing import Any

import httpx

from ..codec import MsgPackBase64Codec, ValueCodec
from ..exceptions import (
    CacheBackendError,
    CacheConnectionError,
    CacheKeyError,
    CacheSerializationError,
    CacheTimeoutError,
)

logger = logging.getLogger(__name__)

# Configuração do sidecar Dapr
DEFAULT_DAPR_HTTP_PORT = 3500
DEFAULT_TIMEOUT_SECONDS = 5.0
MIN_TTL_SECONDS = 1


def _get_dapr_url() -> str:
    """Obtém a URL base do sidecar Dapr."""
    host = os.getenv("DAPR_HTTP_HOST", "127.0.0.1")
    port = os.getenv("DAPR_HTTP_PORT", str(DEFAULT_DAPR_HTTP_PORT))
    return f"http://{host}:{port}"


class DaprStateCache:
    """Backend de cache sobre o Dapr State Store.

    Diferente de um cache "seguro", este backend levanta exceções em
    qualquer falha (conexão, timeout, resposta inesperada, dados
    corrompidos). Envolva-o com ``FaultTolerantProxy`` para conter as
    falhas e notificá-las.

    A API REST do Dapr State usada:
    - GET /v1.0/state/{storename}/{key} - buscar valor
    - POST /v1.0/state/{storename} - salvar valor

    Attributes:
        store_name: Nome do state store configurado no Dapr
    """

    def __init__(
        self,
        store_name: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        dapr_url: str | None = None,
        codec: ValueCodec | None = None,
    ) -> None:
        """Inicializa o backend.

        Args:
            store_name: Nome do state store Dapr
            timeout: Timeout para operações HTTP
            dapr_url: URL do sidecar (usa env vars se não fornecido)
            codec: Codificação dos valores (default: MsgPack + base64)

        Raises:
            CacheKeyError: Se store_name for vazio
        """
        if not store_name:
            raise CacheKeyError("store_name não pode ser vazio")

        self._store_name = store_name
        self._timeout = timeout
        self._base_url = dapr_url or _get_dapr_url()
        self._codec = codec or MsgPackBase64Codec()

        # Cliente criado sob demanda
        self._client: httpx.Client | None = None
        self._client_lock = Lock()

    @property
    def store_name(self) -> str:
        """Nome do state store."""
        return self._store_name

    def _get_client(self) -> httpx.Client:
        """Obtém ou cria cliente HTTP (thread-safe, double-checked locking)."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self._base_url,
                        timeout=self._timeout,
                    )
        return self._client

    def _state_url(self, key: str | None = None) -> str:
        """Constrói URL para operações de state."""
        if key:
            return f"/v1.0/state/{self._store_name}/{key}"
        return f"/v1.0/state/{self._store_name}"

    def _ttl_metadata(self, expires_in: float | None) -> dict[str, str]:
        """Converte expires_in para metadata do Dapr (inteiro >= 1)."""
        if expires_in is None:
            return {}
        ttl_seconds = max(MIN_TTL_SECONDS, math.ceil(expires_in))
        return {"ttlInSeconds": str(ttl_seconds)}

    def read(self, key: str) -> Any | None:
        """Busca valor do cache.

        Args:
            key: Chave do cache

        Returns:
            Valor deserializado ou None se não encontrado

        Raises:
            CacheKeyError: Se a chave for vazia
            CacheConnectionError: Se não conseguir conectar ao sidecar
            CacheTimeoutError: Se a requisição exceder o timeout
            CacheSerializationError: Se o valor armazenado for inválido
            CacheBackendError: Para respostas inesperadas do Dapr
        """
        if not key:
            raise CacheKeyError("Chave não pode ser vazia", key=key)

        try:
            response = self._get_client().get(self._state_url(key))
        except httpx.ConnectError as e:
            raise CacheConnectionError(f"Não foi possível conectar ao sidecar Dapr: {e}", key=key) from e
        except httpx.TimeoutException as e:
            raise CacheTimeoutError(f"Timeout ao buscar chave {key}: {e}", key=key) from e
        except httpx.HTTPError as e:
            raise CacheBackendError(f"Erro HTTP ao buscar chave {key}: {e}", key=key) from e

        if response.status_code not in (200, 204):
            raise CacheBackendError(f"Resposta inesperada do Dapr: {response.status_code}", key=key)

        if response.status_code == 204 or not response.content:
            logger.debug("Cache miss para chave: %s", key)
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise CacheSerializationError(f"Resposta não é JSON válido: {e}", key=key) from e

        logger.debug("Cache hit para chave: %s", key)
        return self._codec.decode(key, data)

    def write(self, key: str, value: Any, expires_in: float | None = None) -> None:
        """Armazena valor no cache.

        Args:
            key: Chave do cache
            value: Valor a armazenar
            expires_in: Tempo de vida em segundos (None para sem expiração)

        Raises:
            CacheKeyError: Se a chave for vazia
            CacheSerializationError: Se o valor não puder ser serializado
            CacheConnectionError: Se não conseguir conectar ao sidecar
            CacheTimeoutError: Se a requisição exceder o timeout
            CacheBackendError: Para respostas inesperadas do Dapr
        """
        if not key:
            raise CacheKeyError("Chave não pode ser vazia", key=key)

        entry: dict[str, Any] = {
            "key": key,
            "value": self._codec.encode(key, value),
        }
        metadata = self._ttl_metadata(expires_in)
        if metadata:
            entry["metadata"] = metadata

        try:
            response = self._get_client().post(self._state_url(), json=[entry])
        except httpx.ConnectError as e:
            raise CacheConnectionError(f"Não foi possível conectar ao sidecar Dapr: {e}", key=key) from e
        except httpx.TimeoutException as e:
            raise CacheTimeoutError(f"Timeout ao salvar chave {key}: {e}", key=key) from e
        except httpx.HTTPError as e:
            raise CacheBackendError(f"Erro HTTP ao salvar chave {key}: {e}", key=key) from e

        if response.status_code not in (200, 201, 204):
            raise CacheBackendError(f"Falha ao salvar cache: {response.status_code}", key=key)

        logger.debug("Cache set para chave: %s, TTL: %s", key, metadata.get("ttlInSeconds", "none"))

    def close(self) -> None:
        """Fecha o cliente HTTP."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "DaprStateCache":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
