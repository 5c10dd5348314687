"""Pluggable crypto and Base32 backends."""

from otpkit.plugins.base import (
    Base32Plugin,
    CryptoPlugin,
    create_base32_plugin,
    create_crypto_plugin,
    require_base32_plugin,
    require_crypto_plugin,
)
from otpkit.plugins.base32 import RFC4648Base32Plugin
from otpkit.plugins.context import Base32Context, CryptoContext
from otpkit.plugins.crypto import AsyncCryptographyPlugin, CryptographyPlugin, HashlibPlugin

__all__ = [
    "AsyncCryptographyPlugin",
    "Base32Context",
    "Base32Plugin",
    "CryptoContext",
    "CryptoPlugin",
    "CryptographyPlugin",
    "HashlibPlugin",
    "RFC4648Base32Plugin",
    "create_base32_plugin",
    "create_crypto_plugin",
    "require_base32_plugin",
    "require_crypto_plugin",
]
