"""Byte-level primitives shared by the HOTP and TOTP engines."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, ParamSpec, TypeVar

from otpkit.errors import OTPError
from otpkit.models import HashAlgorithm

T = TypeVar("T")
P = ParamSpec("P")

_DIGEST_SIZES: dict[HashAlgorithm, int] = {
    HashAlgorithm.SHA1: 20,
    HashAlgorithm.SHA256: 32,
    HashAlgorithm.SHA512: 64,
}


def counter_to_bytes(counter: int) -> bytes:
    """Encode a counter as 8-byte big-endian (RFC 4226 section 5.1)."""
    return counter.to_bytes(8, "big")


def dynamic_truncate(digest: bytes) -> int:
    """RFC 4226 section 5.3 dynamic truncation to an unsigned 31-bit integer."""
    offset = digest[-1] & 0x0F
    return (
        (digest[offset] & 0x7F) << 24
        | digest[offset + 1] << 16
        | digest[offset + 2] << 8
        | digest[offset + 3]
    )


def truncate_digits(value: int, digits: int) -> str:
    return str(value % 10**digits).zfill(digits)


def digest_size(algorithm: HashAlgorithm) -> int:
    return _DIGEST_SIZES[HashAlgorithm(algorithm)]


def string_to_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def constant_time_equal(a: str | bytes, b: str | bytes) -> bool:
    """Compare two values without exiting early on the first mismatch.

    Best effort only: CPython gives no hard timing guarantees. A length
    mismatch returns immediately since token lengths are not secret.
    """
    left = string_to_bytes(a)
    right = string_to_bytes(b)
    if len(left) != len(right):
        return False
    result = 0
    for x, y in zip(left, right):
        result |= x ^ y
    return result == 0


# === Result wrapping ===


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Err:
    error: OTPError
    ok: bool = False


def wrap_result(fn: Callable[P, T]) -> Callable[P, Ok[T] | Err]:
    """Wrap ``fn`` so OTP errors are returned as :class:`Err` instead of raised."""

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Ok[T] | Err:
        try:
            return Ok(fn(*args, **kwargs))
        except OTPError as e:
            return Err(e)

    return wrapper


def wrap_result_async(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[Ok[T] | Err]]:
    """Async counterpart of :func:`wrap_result`."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Ok[T] | Err:
        try:
            return Ok(await fn(*args, **kwargs))
        except OTPError as e:
            return Err(e)

    return wrapper
