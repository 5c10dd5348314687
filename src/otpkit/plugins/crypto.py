"""Concrete crypto backends."""

from __future__ import annotations

import asyncio
import hashlib
import hmac as _hmac
import os
import secrets

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from otpkit.models import HashAlgorithm
from otpkit.utils import string_to_bytes

_CRYPTOGRAPHY_HASHES: dict[HashAlgorithm, type[hashes.HashAlgorithm]] = {
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA512: hashes.SHA512,
}


class CryptographyPlugin:
    """Synchronous backend built on ``cryptography``. Used by default."""

    name = "cryptography"

    def hmac(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes:
        h = hmac.HMAC(key, _CRYPTOGRAPHY_HASHES[HashAlgorithm(algorithm)]())
        h.update(data)
        return h.finalize()

    def random_bytes(self, length: int) -> bytes:
        return os.urandom(length)

    def constant_time_equal(self, a: str | bytes, b: str | bytes) -> bool:
        return constant_time.bytes_eq(string_to_bytes(a), string_to_bytes(b))


class AsyncCryptographyPlugin(CryptographyPlugin):
    """Same primitives, but ``hmac`` is a coroutine run off the event loop."""

    name = "cryptography-async"

    async def hmac(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes:
        return await asyncio.to_thread(super().hmac, algorithm, key, data)


class HashlibPlugin:
    """Standard library backend (``hmac`` + ``secrets``)."""

    name = "hashlib"

    def hmac(self, algorithm: HashAlgorithm, key: bytes, data: bytes) -> bytes:
        return _hmac.new(key, data, getattr(hashlib, HashAlgorithm(algorithm).value)).digest()

    def random_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)

    def constant_time_equal(self, a: str | bytes, b: str | bytes) -> bool:
        return _hmac.compare_digest(string_to_bytes(a), string_to_bytes(b))
