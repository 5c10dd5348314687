"""Capability contracts for cryptographic and Base32 backends."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from otpkit.errors import (
    Base32DecodeError,
    Base32EncodeError,
    Base32Error,
    Base32PluginMissingError,
    CryptoPluginMissingError,
)
from otpkit.models import HashAlgorithm
from otpkit.utils import constant_time_equal as builtin_constant_time_equal

HmacFunc = Callable[[HashAlgorithm, bytes, bytes], bytes | Awaitable[bytes]]


@runtime_checkable
class CryptoPlugin(Protocol):
    """HMAC and randomness provider.

    ``hmac`` may return the digest directly or an awaitable resolving to it.
    A plugin may also define ``constant_time_equal(a, b) -> bool``; when it
    does not, the built-in comparison is used.
    """

    name: str

    def hmac(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes | Awaitable[bytes]: ...

    def random_bytes(self, length: int) -> bytes: ...


@runtime_checkable
class Base32Plugin(Protocol):
    name: str

    def encode(self, data: bytes, *, padding: bool = False) -> str: ...

    def decode(self, text: str) -> bytes: ...


@dataclass(frozen=True)
class FunctionCryptoPlugin:
    name: str
    hmac: HmacFunc
    random_bytes: Callable[[int], bytes]
    constant_time_equal: Callable[[str | bytes, str | bytes], bool]


@dataclass(frozen=True)
class FunctionBase32Plugin:
    name: str
    _encode: Callable[[bytes], str]
    _decode: Callable[[str], bytes]

    def encode(self, data: bytes, *, padding: bool = False) -> str:
        try:
            encoded = self._encode(data)
        except Base32Error:
            raise
        except Exception as e:
            raise Base32EncodeError(str(e)) from e
        return encoded if padding else encoded.rstrip("=")

    def decode(self, text: str) -> bytes:
        try:
            return self._decode(text)
        except Base32Error:
            raise
        except Exception as e:
            raise Base32DecodeError(str(e)) from e


def create_crypto_plugin(
    hmac: HmacFunc,
    random_bytes: Callable[[int], bytes],
    constant_time_equal: Callable[[str | bytes, str | bytes], bool] | None = None,
    name: str = "custom",
) -> CryptoPlugin:
    """Build a crypto plugin from plain callables."""
    return FunctionCryptoPlugin(
        name=name,
        hmac=hmac,
        random_bytes=random_bytes,
        constant_time_equal=constant_time_equal or builtin_constant_time_equal,
    )


def create_base32_plugin(
    encode: Callable[[bytes], str],
    decode: Callable[[str], bytes],
    name: str = "custom",
) -> Base32Plugin:
    """Build a Base32 plugin from plain callables; failures are wrapped."""
    return FunctionBase32Plugin(name=name, _encode=encode, _decode=decode)


def require_crypto_plugin(crypto: CryptoPlugin | None) -> CryptoPlugin:
    if crypto is None:
        raise CryptoPluginMissingError()
    return crypto


def require_base32_plugin(base32: Base32Plugin | None) -> Base32Plugin:
    if base32 is None:
        raise Base32PluginMissingError()
    return base32
