"""Secret normalization and generation."""

from __future__ import annotations

from otpkit.guardrails import RECOMMENDED_SECRET_BYTES
from otpkit.plugins.base import Base32Plugin, CryptoPlugin
from otpkit.plugins.context import Base32Context, CryptoContext


def normalize_secret(secret: str | bytes, base32: Base32Plugin | None = None) -> bytes:
    """Return the secret as raw bytes.

    Text is always treated as Base32 and needs a Base32 plugin. Raw
    passphrases must be encoded to bytes by the caller first.
    """
    if isinstance(secret, str):
        return Base32Context(base32).decode(secret)
    return bytes(secret)


def generate_secret(
    crypto: CryptoPlugin | None,
    base32: Base32Plugin | None,
    length: int = RECOMMENDED_SECRET_BYTES,
) -> str:
    """Generate a random secret, Base32-encoded without padding."""
    crypto_ctx = CryptoContext(crypto)
    base32_ctx = Base32Context(base32)
    return base32_ctx.encode(crypto_ctx.random_bytes(length), padding=False)
