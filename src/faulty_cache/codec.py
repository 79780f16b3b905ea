"""
Value encoding for state stores that carry values as JSON strings.

Values are packed with MsgPack and wrapped in base64 so they survive the
JSON body of the Dapr state API. Every failure is reported as
``CacheSerializationError`` carrying the cache key, so the proxy can
contain it like any other backend failure.
"""

import base64
import binascii
from typing import Any, Protocol

import msgpack

from .exceptions import CacheSerializationError


class ValueCodec(Protocol):
    """Protocol for value codecs used by string-based backends."""

    def encode(self, key: str, value: Any) -> str:
        """Encode a value for storage under ``key``."""
        ...

    def decode(self, key: str, data: Any) -> Any:
        """Decode data previously stored under ``key``."""
        ...


class MsgPackBase64Codec:
    """MsgPack + base64 codec.

    Supports None, bool, int, float, str, bytes, list, tuple and dict.
    Tuples come back as lists; bytes stay bytes (``use_bin_type``).
    """

    def encode(self, key: str, value: Any) -> str:
        """Pack ``value`` and return it as an ASCII base64 string.

        Raises:
            CacheSerializationError: If the value cannot be packed
        """
        try:
            packed = msgpack.packb(value, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise CacheSerializationError(f"Cannot encode value: {e}", key=key) from e
        return base64.b64encode(packed).decode("ascii")

    def decode(self, key: str, data: Any) -> Any:
        """Decode a base64 string produced by ``encode``.

        Raises:
            CacheSerializationError: If data is not a string, not base64,
                or not valid MsgPack
        """
        if not isinstance(data, str):
            raise CacheSerializationError(f"Unexpected stored format: {type(data).__name__}", key=key)
        try:
            packed = base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise CacheSerializationError(f"Stored value is not valid base64: {e}", key=key) from e
        try:
            return msgpack.unpackb(packed, raw=False)
        except (msgpack.UnpackException, ValueError) as e:
            raise CacheSerializationError(f"Stored value is not valid MsgPack: {e}", key=key) from e
