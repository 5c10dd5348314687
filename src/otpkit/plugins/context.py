"""Context wrappers that give every backend the same calling convention.

Backend exceptions never escape these wrappers unchanged: they are re-raised
as ``HMACError``, ``RandomBytesError``, ``Base32EncodeError`` or
``Base32DecodeError`` with the original exception as ``__cause__``.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from otpkit.errors import (
    Base32DecodeError,
    Base32EncodeError,
    Base32Error,
    HMACError,
    RandomBytesError,
)
from otpkit.models import HashAlgorithm
from otpkit.plugins.base import (
    Base32Plugin,
    CryptoPlugin,
    require_base32_plugin,
    require_crypto_plugin,
)
from otpkit.utils import constant_time_equal, digest_size

logger = logging.getLogger(__name__)


def _discard(awaitable: Any) -> None:
    """Dispose of an awaitable that will never be awaited."""
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    elif hasattr(awaitable, "cancel"):
        awaitable.cancel()


class CryptoContext:
    def __init__(self, plugin: CryptoPlugin | None) -> None:
        self._plugin = require_crypto_plugin(plugin)

    @property
    def plugin(self) -> CryptoPlugin:
        return self._plugin

    def _check_digest(self, algorithm: HashAlgorithm, digest: Any) -> bytes:
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            raise HMACError(f"backend returned {type(digest).__name__}, expected bytes")
        digest = bytes(digest)
        expected = digest_size(algorithm)
        if len(digest) != expected:
            raise HMACError(f"expected a {expected}-byte {algorithm} digest, got {len(digest)} bytes")
        return digest

    async def hmac(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes:
        """Compute an HMAC, awaiting the backend if it is asynchronous."""
        try:
            result = self._plugin.hmac(algorithm, key, data)
            if inspect.isawaitable(result):
                result = await result
        except HMACError:
            raise
        except Exception as e:
            logger.debug("HMAC backend %s failed", self._plugin.name, exc_info=True)
            raise HMACError(str(e)) from e
        return self._check_digest(algorithm, result)

    def hmac_sync(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes:
        """Compute an HMAC synchronously.

        Raises ``HMACError`` if the backend is asynchronous instead of
        blocking on it.
        """
        try:
            result = self._plugin.hmac(algorithm, key, data)
        except HMACError:
            raise
        except Exception as e:
            logger.debug("HMAC backend %s failed", self._plugin.name, exc_info=True)
            raise HMACError(str(e)) from e
        if inspect.isawaitable(result):
            _discard(result)
            raise HMACError(f"crypto plugin '{self._plugin.name}' does not support synchronous HMAC operations")
        return self._check_digest(algorithm, result)

    def random_bytes(self, length: int) -> bytes:
        try:
            data = self._plugin.random_bytes(length)
        except Exception as e:
            logger.debug("Random bytes backend %s failed", self._plugin.name, exc_info=True)
            raise RandomBytesError(str(e)) from e
        if len(data) != length:
            raise RandomBytesError(f"requested {length} bytes, got {len(data)}")
        return bytes(data)

    def constant_time_equal(self, a: str | bytes, b: str | bytes) -> bool:
        compare = getattr(self._plugin, "constant_time_equal", None)
        if compare is None:
            return constant_time_equal(a, b)
        return bool(compare(a, b))


class Base32Context:
    def __init__(self, plugin: Base32Plugin | None) -> None:
        self._plugin = require_base32_plugin(plugin)

    @property
    def plugin(self) -> Base32Plugin:
        return self._plugin

    def encode(self, data: bytes, *, padding: bool = False) -> str:
        try:
            return self._plugin.encode(data, padding=padding)
        except Base32Error:
            raise
        except Exception as e:
            raise Base32EncodeError(str(e)) from e

    def decode(self, text: str) -> bytes:
        try:
            return self._plugin.decode(text)
        except Base32Error:
            raise
        except Exception as e:
            raise Base32DecodeError(str(e)) from e
