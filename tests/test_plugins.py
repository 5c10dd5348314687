"""Tests for crypto/Base32 backends and their contexts."""

from __future__ import annotations

import asyncio
import base64

import pytest

from otpkit.errors import (
    Base32DecodeError,
    Base32EncodeError,
    Base32PluginMissingError,
    CryptoPluginMissingError,
    HMACError,
    RandomBytesError,
)
from otpkit.models import HashAlgorithm
from otpkit.plugins import (
    AsyncCryptographyPlugin,
    Base32Context,
    Base32Plugin,
    CryptoContext,
    CryptoPlugin,
    CryptographyPlugin,
    HashlibPlugin,
    RFC4648Base32Plugin,
    create_base32_plugin,
    create_crypto_plugin,
)
from otpkit.secret import generate_secret, normalize_secret

KEY = b"12345678901234567890"


def test_builtin_plugins_satisfy_protocols():
    assert isinstance(CryptographyPlugin(), CryptoPlugin)
    assert isinstance(AsyncCryptographyPlugin(), CryptoPlugin)
    assert isinstance(HashlibPlugin(), CryptoPlugin)
    assert isinstance(RFC4648Base32Plugin(), Base32Plugin)


@pytest.mark.parametrize("algorithm,size", [("sha1", 20), ("sha256", 32), ("sha512", 64)])
def test_hmac_digest_sizes(algorithm, size):
    ctx = CryptoContext(CryptographyPlugin())
    assert len(ctx.hmac_sync(HashAlgorithm(algorithm), KEY, b"data")) == size


def test_async_context_accepts_sync_and_async_backends():
    sync_digest = asyncio.run(CryptoContext(CryptographyPlugin()).hmac(HashAlgorithm.SHA1, KEY, b"x"))
    async_digest = asyncio.run(CryptoContext(AsyncCryptographyPlugin()).hmac(HashAlgorithm.SHA1, KEY, b"x"))
    assert sync_digest == async_digest


def test_hmac_sync_rejects_awaitable():
    ctx = CryptoContext(AsyncCryptographyPlugin())
    with pytest.raises(HMACError, match="cryptography-async"):
        ctx.hmac_sync(HashAlgorithm.SHA1, KEY, b"x")


def test_hmac_failure_is_wrapped():
    def broken(algorithm, key, data):
        raise RuntimeError("backend down")

    ctx = CryptoContext(create_crypto_plugin(broken, lambda n: bytes(n)))
    with pytest.raises(HMACError, match="backend down") as exc_info:
        ctx.hmac_sync(HashAlgorithm.SHA1, KEY, b"x")
    assert isinstance(exc_info.value.__cause__, RuntimeError)

    with pytest.raises(HMACError) as exc_info:
        asyncio.run(ctx.hmac(HashAlgorithm.SHA1, KEY, b"x"))
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_async_hmac_failure_is_wrapped():
    async def broken(algorithm, key, data):
        raise ValueError("nope")

    ctx = CryptoContext(create_crypto_plugin(broken, lambda n: bytes(n)))
    with pytest.raises(HMACError) as exc_info:
        asyncio.run(ctx.hmac(HashAlgorithm.SHA1, KEY, b"x"))
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_hmac_error_from_backend_is_not_wrapped_twice():
    def refuses(algorithm, key, data):
        raise HMACError("refused")

    ctx = CryptoContext(create_crypto_plugin(refuses, lambda n: bytes(n)))
    with pytest.raises(HMACError) as exc_info:
        ctx.hmac_sync(HashAlgorithm.SHA1, KEY, b"x")
    assert str(exc_info.value) == "HMAC computation failed: refused"


def test_wrong_digest_length_is_rejected():
    ctx = CryptoContext(create_crypto_plugin(lambda a, k, d: b"short", lambda n: bytes(n)))
    with pytest.raises(HMACError, match="20-byte"):
        ctx.hmac_sync(HashAlgorithm.SHA1, KEY, b"x")


def test_non_bytes_digest_is_rejected():
    ctx = CryptoContext(create_crypto_plugin(lambda a, k, d: "0" * 20, lambda n: bytes(n)))
    with pytest.raises(HMACError, match="str"):
        ctx.hmac_sync(HashAlgorithm.SHA1, KEY, b"x")


def test_random_bytes():
    ctx = CryptoContext(HashlibPlugin())
    assert len(ctx.random_bytes(32)) == 32

    def broken(length):
        raise OSError("no entropy")

    with pytest.raises(RandomBytesError) as exc_info:
        CryptoContext(create_crypto_plugin(HashlibPlugin().hmac, broken)).random_bytes(16)
    assert isinstance(exc_info.value.__cause__, OSError)

    with pytest.raises(RandomBytesError):
        CryptoContext(create_crypto_plugin(HashlibPlugin().hmac, lambda n: b"\x00")).random_bytes(16)


def test_constant_time_equal_uses_plugin_or_builtin():
    calls = []

    def compare(a, b):
        calls.append((a, b))
        return a == b

    ctx = CryptoContext(create_crypto_plugin(HashlibPlugin().hmac, HashlibPlugin().random_bytes, compare))
    assert ctx.constant_time_equal("123456", "123456")
    assert calls == [("123456", "123456")]

    builtin = CryptoContext(create_crypto_plugin(HashlibPlugin().hmac, HashlibPlugin().random_bytes))
    assert builtin.constant_time_equal("123456", "123456")
    assert not builtin.constant_time_equal("123456", "123457")
    assert not builtin.constant_time_equal("123456", "1234567")


def test_missing_plugins():
    with pytest.raises(CryptoPluginMissingError):
        CryptoContext(None)
    with pytest.raises(Base32PluginMissingError):
        Base32Context(None)
    with pytest.raises(Base32PluginMissingError):
        normalize_secret("GEZDGNBVGY3TQOJQ")


def test_rfc4648_codec():
    codec = RFC4648Base32Plugin()
    assert codec.encode(KEY) == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    assert codec.encode(b"hello") == "NBSWY3DP"
    assert codec.encode(b"hi") == "NBUQ"
    assert codec.encode(b"hi", padding=True) == "NBUQ===="
    assert codec.decode("nbuq") == b"hi"
    assert codec.decode("NBUQ====") == b"hi"


def test_rfc4648_rejects_invalid_characters():
    codec = RFC4648Base32Plugin()
    with pytest.raises(Base32DecodeError):
        codec.decode("NBU1")
    with pytest.raises(Base32DecodeError):
        Base32Context(codec).decode("NBU1")


def test_custom_base32_plugin_wraps_failures():
    def decode(text):
        return base64.b32decode(text)

    def encode(data):
        raise TypeError("unsupported")

    ctx = Base32Context(create_base32_plugin(encode, decode, name="strict"))
    with pytest.raises(Base32DecodeError) as exc_info:
        ctx.decode("not base32!")
    assert exc_info.value.__cause__ is not None

    with pytest.raises(Base32EncodeError) as exc_info:
        ctx.encode(b"data")
    assert isinstance(exc_info.value.__cause__, TypeError)


def test_custom_base32_plugin_strips_padding():
    plugin = create_base32_plugin(lambda d: base64.b32encode(d).decode(), base64.b32decode)
    assert plugin.encode(b"hi") == "NBUQ"
    assert plugin.encode(b"hi", padding=True) == "NBUQ===="


def test_normalize_secret():
    assert normalize_secret(KEY) == KEY
    assert normalize_secret(bytearray(KEY)) == KEY
    assert normalize_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", RFC4648Base32Plugin()) == KEY


def test_generate_secret():
    secret = generate_secret(CryptographyPlugin(), RFC4648Base32Plugin())
    assert "=" not in secret
    assert len(RFC4648Base32Plugin().decode(secret)) == 20
    assert len(RFC4648Base32Plugin().decode(generate_secret(HashlibPlugin(), RFC4648Base32Plugin(), 32))) == 32
