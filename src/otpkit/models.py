"""Pydantic models for values passed in and out of the OTP engines."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


# === Enums ===


class HashAlgorithm(StrEnum):
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


class OTPType(StrEnum):
    HOTP = "hotp"
    TOTP = "totp"


class ScanOrder(StrEnum):
    """Order in which TOTP time steps are tried inside the tolerance window."""

    NEAREST = "nearest"  # 0, -1, +1, -2, +2, ...
    CHRONOLOGICAL = "chronological"  # oldest step first


# === Results ===


class VerifyResult(BaseModel):
    """Outcome of a single verification call.

    ``delta`` is the signed offset, in counter or time steps, between the
    expected value and the one that matched. For TOTP matches ``epoch`` is the
    start of the matched time step and ``time_step`` its counter.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    delta: int | None = None
    epoch: int | None = None
    time_step: int | None = None

    def __bool__(self) -> bool:
        return self.valid


# === otpauth:// URI ===


class OTPAuthParams(BaseModel):
    """Query parameters of an ``otpauth://`` URI."""

    model_config = ConfigDict(frozen=True)

    secret: str
    issuer: str | None = None
    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    digits: int = 6
    counter: int | None = None
    period: int | None = None


class OTPAuthURI(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: OTPType
    label: str
    params: OTPAuthParams
