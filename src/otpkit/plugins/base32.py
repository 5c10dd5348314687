"""RFC 4648 Base32 codec backend."""

from __future__ import annotations

import base64
import binascii
import re

from otpkit.errors import Base32DecodeError

_ALPHABET = re.compile(r"[A-Z2-7]*")


class RFC4648Base32Plugin:
    """Base32 codec over :mod:`base64`.

    Decoding is case-insensitive and tolerates missing ``=`` padding, since
    authenticator apps usually strip it.
    """

    name = "rfc4648"

    def encode(self, data: bytes, *, padding: bool = False) -> str:
        encoded = base64.b32encode(data).decode("ascii")
        return encoded if padding else encoded.rstrip("=")

    def decode(self, text: str) -> bytes:
        body = text.upper().rstrip("=")
        if not _ALPHABET.fullmatch(body):
            raise Base32DecodeError(f"invalid character in {len(text)}-character Base32 string")
        # restore padding: 8 chars carry 5 bytes
        body += "=" * (-len(body) % 8)
        try:
            return base64.b32decode(body)
        except binascii.Error as e:
            raise Base32DecodeError(str(e)) from e
