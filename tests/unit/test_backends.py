"""Testes para os backends de referência."""

import base64
from unittest.mock import MagicMock, patch

import httpx
import msgpack
import pytest

from faulty_cache.backends import DaprStateCache, MemoryCache, NullCache
from faulty_cache.backends.dapr import _get_dapr_url
from faulty_cache.exceptions import (
    CacheBackendError,
    CacheConnectionError,
    CacheKeyError,
    CacheSerializationError,
    CacheTimeoutError,
)
from faulty_cache.protocols import CacheBackend


def _encoded(value: object) -> str:
    return base64.b64encode(msgpack.packb(value, use_bin_type=True)).decode("ascii")


def _response(status_code: int, json_value: object = None, content: bytes = b"x") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.json.return_value = json_value
    return response


@pytest.fixture
def dapr_cache() -> DaprStateCache:
    backend = DaprStateCache("store", dapr_url="http://test:3500")
    backend._client = httpx.Client(base_url="http://test:3500")
    return backend


class TestNullCache:
    """Testes para NullCache."""

    def test_never_stores(self) -> None:
        """Deve sempre retornar None."""
        cache = NullCache()
        cache.write("k", "v", expires_in=60)
        assert cache.read("k") is None

    def test_is_cache_backend(self) -> None:
        """Deve satisfazer o protocol CacheBackend."""
        assert isinstance(NullCache(), CacheBackend)

    def test_public_methods_are_documented(self) -> None:
        """Deve documentar read e write."""
        assert NullCache.read.__doc__
        assert NullCache.write.__doc__


class TestMemoryCache:
    """Testes para MemoryCache."""

    def test_write_then_read(self) -> None:
        """Deve retornar o valor escrito."""
        cache = MemoryCache()
        cache.write("k", {"a": 1})
        assert cache.read("k") == {"a": 1}

    def test_missing_key(self) -> None:
        """Deve retornar None para chave ausente."""
        assert MemoryCache().read("missing") is None

    def test_expires_entry(self) -> None:
        """Deve expirar entrada após expires_in."""
        now = [100.0]
        cache = MemoryCache(clock=lambda: now[0])
        cache.write("k", "v", expires_in=10)

        now[0] = 109.9
        assert cache.read("k") == "v"

        now[0] = 110.0
        assert cache.read("k") is None
        assert len(cache) == 0

    def test_no_expiry_by_default(self) -> None:
        """Deve manter entrada sem expires_in indefinidamente."""
        now = [0.0]
        cache = MemoryCache(clock=lambda: now[0])
        cache.write("k", "v")

        now[0] = 1e9
        assert cache.read("k") == "v"

    def test_clear(self) -> None:
        """Deve remover todas as entradas."""
        cache = MemoryCache()
        cache.write("a", 1)
        cache.write("b", 2)
        cache.clear()
        assert len(cache) == 0


class TestGetDaprUrl:
    """Testes para _get_dapr_url."""

    def test_default_url(self) -> None:
        """Deve retornar URL padrão."""
        with patch.dict("os.environ", {}, clear=True):
            assert _get_dapr_url() == "http://127.0.0.1:3500"

    def test_custom_host_and_port(self) -> None:
        """Deve usar variáveis de ambiente."""
        with patch.dict("os.environ", {"DAPR_HTTP_HOST": "custom", "DAPR_HTTP_PORT": "3501"}):
            assert _get_dapr_url() == "http://custom:3501"


class TestDaprStateCache:
    """Testes para DaprStateCache."""

    def test_init_empty_store_name_raises_error(self) -> None:
        """Deve lançar erro com store_name vazio."""
        with pytest.raises(CacheKeyError):
            DaprStateCache("")

    def test_explicit_url_takes_precedence(self) -> None:
        """Deve preferir URL explícita às variáveis de ambiente."""
        with patch.dict("os.environ", {"DAPR_HTTP_HOST": "env-host"}):
            backend = DaprStateCache("store", dapr_url="http://explicit:3500")
        assert backend._base_url == "http://explicit:3500"

    def test_state_url(self) -> None:
        """Deve construir URLs de state."""
        backend = DaprStateCache("mystore")
        assert backend._state_url() == "/v1.0/state/mystore"
        assert backend._state_url("mykey") == "/v1.0/state/mystore/mykey"

    @pytest.mark.parametrize(("expires_in", "expected"), [(None, {}), (60, {"ttlInSeconds": "60"}), (0.2, {"ttlInSeconds": "1"}), (1.5, {"ttlInSeconds": "2"})])
    def test_ttl_metadata(self, expires_in: float | None, expected: dict) -> None:
        """Deve converter expires_in para inteiro >= 1."""
        assert DaprStateCache("store")._ttl_metadata(expires_in) == expected

    def test_read_empty_key_raises_error(self) -> None:
        """Deve lançar erro para chave vazia no read."""
        with pytest.raises(CacheKeyError):
            DaprStateCache("store").read("")

    def test_write_empty_key_raises_error(self) -> None:
        """Deve lançar erro para chave vazia no write."""
        with pytest.raises(CacheKeyError):
            DaprStateCache("store").write("", "v")

    def test_context_manager(self) -> None:
        """Deve fechar o cliente ao sair do contexto."""
        with DaprStateCache("store") as backend:
            backend._get_client()
        assert backend._client is None


class TestDaprStateCacheRead:
    """Testes para DaprStateCache.read."""

    def test_miss_204(self, dapr_cache: DaprStateCache) -> None:
        """Deve retornar None para status 204."""
        with patch.object(httpx.Client, "get", return_value=_response(204, content=b"")):
            assert dapr_cache.read("mykey") is None

    def test_hit(self, dapr_cache: DaprStateCache) -> None:
        """Deve retornar valor deserializado."""
        with patch.object(httpx.Client, "get", return_value=_response(200, _encoded({"name": "Ana"}))) as get:
            assert dapr_cache.read("mykey") == {"name": "Ana"}
        get.assert_called_once_with("/v1.0/state/store/mykey")

    def test_unexpected_status_raises(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheBackendError para status inesperado."""
        with patch.object(httpx.Client, "get", return_value=_response(500)):
            with pytest.raises(CacheBackendError):
                dapr_cache.read("mykey")

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_error_status_with_empty_body_raises(self, dapr_cache: DaprStateCache, status_code: int) -> None:
        """Deve lançar CacheBackendError para erro HTTP sem corpo, não tratar como miss."""
        with patch.object(httpx.Client, "get", return_value=_response(status_code, content=b"")):
            with pytest.raises(CacheBackendError):
                dapr_cache.read("mykey")

    def test_ok_with_empty_body_is_miss(self, dapr_cache: DaprStateCache) -> None:
        """Deve retornar None para 200 sem corpo."""
        with patch.object(httpx.Client, "get", return_value=_response(200, content=b"")):
            assert dapr_cache.read("mykey") is None

    def test_connect_error(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheConnectionError em erro de conexão."""
        with patch.object(httpx.Client, "get", side_effect=httpx.ConnectError("Connection refused")):
            with pytest.raises(CacheConnectionError) as exc_info:
                dapr_cache.read("mykey")
        assert exc_info.value.key == "mykey"

    def test_timeout(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheTimeoutError em timeout."""
        with patch.object(httpx.Client, "get", side_effect=httpx.ReadTimeout("Timeout")):
            with pytest.raises(CacheTimeoutError):
                dapr_cache.read("mykey")

    def test_invalid_base64(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheSerializationError para base64 inválido."""
        with patch.object(httpx.Client, "get", return_value=_response(200, "not-base64!")):
            with pytest.raises(CacheSerializationError):
                dapr_cache.read("mykey")

    def test_non_string_payload(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheSerializationError para payload que não é string."""
        with patch.object(httpx.Client, "get", return_value=_response(200, 12345)):
            with pytest.raises(CacheSerializationError):
                dapr_cache.read("mykey")

    def test_invalid_json(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheSerializationError para JSON inválido."""
        response = _response(200)
        response.json.side_effect = ValueError("bad json")
        with patch.object(httpx.Client, "get", return_value=response):
            with pytest.raises(CacheSerializationError):
                dapr_cache.read("mykey")


class TestDaprStateCacheWrite:
    """Testes para DaprStateCache.write."""

    def test_write_with_ttl(self, dapr_cache: DaprStateCache) -> None:
        """Deve enviar valor codificado com ttlInSeconds."""
        with patch.object(httpx.Client, "post", return_value=_response(204)) as post:
            dapr_cache.write("mykey", [1, 2], expires_in=60)

        post.assert_called_once_with(
            "/v1.0/state/store",
            json=[{"key": "mykey", "value": _encoded([1, 2]), "metadata": {"ttlInSeconds": "60"}}],
        )

    def test_write_without_ttl(self, dapr_cache: DaprStateCache) -> None:
        """Deve omitir metadata sem expires_in."""
        with patch.object(httpx.Client, "post", return_value=_response(204)) as post:
            dapr_cache.write("mykey", "v")

        assert "metadata" not in post.call_args.kwargs["json"][0]

    def test_write_failure_status_raises(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheBackendError para status de falha."""
        with patch.object(httpx.Client, "post", return_value=_response(500)):
            with pytest.raises(CacheBackendError):
                dapr_cache.write("mykey", "v")

    def test_write_connect_error(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheConnectionError em erro de conexão."""
        with patch.object(httpx.Client, "post", side_effect=httpx.ConnectError("Connection refused")):
            with pytest.raises(CacheConnectionError):
                dapr_cache.write("mykey", "v")

    def test_write_timeout(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheTimeoutError em timeout."""
        with patch.object(httpx.Client, "post", side_effect=httpx.WriteTimeout("Timeout")):
            with pytest.raises(CacheTimeoutError):
                dapr_cache.write("mykey", "v")

    def test_write_unserializable_value(self, dapr_cache: DaprStateCache) -> None:
        """Deve lançar CacheSerializationError sem chamar o sidecar."""
        with patch.object(httpx.Client, "post") as post:
            with pytest.raises(CacheSerializationError):
                dapr_cache.write("mykey", object())
        post.assert_not_called()
