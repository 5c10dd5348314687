"""One entry point for both strategies, with defaults filled in.

Unlike the engines, these functions supply a default crypto backend
(``cryptography``), a default Base32 codec, settings-driven defaults for
algorithm/digits/period/guardrails, and the current time when ``epoch`` is
omitted.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from otpkit import config, hotp, totp
from otpkit import uri as otpauth
from otpkit.errors import ConfigurationError
from otpkit.guardrails import Guardrails, Tolerance
from otpkit.models import HashAlgorithm, OTPType, ScanOrder, VerifyResult
from otpkit.plugins.base import Base32Plugin, CryptoPlugin
from otpkit.plugins.base32 import RFC4648Base32Plugin
from otpkit.plugins.crypto import CryptographyPlugin
from otpkit.secret import generate_secret as _generate_secret

T = TypeVar("T")

default_crypto: CryptoPlugin = CryptographyPlugin()
default_base32: Base32Plugin = RFC4648Base32Plugin()


@dataclass(frozen=True)
class _Defaults:
    strategy: OTPType
    crypto: CryptoPlugin
    base32: Base32Plugin
    algorithm: HashAlgorithm | str
    digits: int
    period: int
    epoch: float
    guardrails: Guardrails


def _strategy(strategy: OTPType | str) -> OTPType:
    try:
        return OTPType(strategy)
    except ValueError:
        raise ConfigurationError(
            f"Unknown OTP strategy: {strategy!r}. Valid strategies are 'totp' or 'hotp'"
        ) from None


def _resolve(
    strategy: OTPType | str,
    crypto: CryptoPlugin | None,
    base32: Base32Plugin | None,
    algorithm: str | None,
    digits: int | None,
    period: int | None,
    epoch: float | None,
    guardrails: Guardrails | None,
) -> _Defaults:
    settings = config.settings
    return _Defaults(
        strategy=_strategy(strategy),
        crypto=default_crypto if crypto is None else crypto,
        base32=default_base32 if base32 is None else base32,
        algorithm=settings.algorithm if algorithm is None else algorithm,
        digits=settings.digits if digits is None else digits,
        period=settings.period if period is None else period,
        epoch=time.time() if epoch is None else epoch,
        guardrails=settings.guardrails() if guardrails is None else guardrails,
    )


def _dispatch(
    strategy: OTPType,
    counter: int | None,
    on_totp: Callable[[], T],
    on_hotp: Callable[[int], T],
) -> T:
    if strategy == OTPType.TOTP:
        return on_totp()
    if counter is None:
        raise ConfigurationError("Counter is required for the HOTP strategy, e.g. counter=0")
    return on_hotp(counter)


def generate_secret(
    length: int | None = None,
    crypto: CryptoPlugin | None = None,
    base32: Base32Plugin | None = None,
) -> str:
    """Generate a random unpadded Base32 secret (20 bytes unless configured otherwise)."""
    return _generate_secret(
        default_crypto if crypto is None else crypto,
        default_base32 if base32 is None else base32,
        config.settings.secret_length if length is None else length,
    )


def generate_uri(
    issuer: str | None,
    label: str,
    secret: str,
    *,
    strategy: OTPType | str = OTPType.TOTP,
    algorithm: str | None = None,
    digits: int | None = None,
    period: int | None = None,
    counter: int | None = None,
) -> str:
    settings = config.settings
    algorithm = settings.algorithm if algorithm is None else algorithm
    digits = settings.digits if digits is None else digits
    period = settings.period if period is None else period
    return _dispatch(
        _strategy(strategy),
        counter,
        lambda: otpauth.generate_totp(
            issuer, label, secret, algorithm=algorithm, digits=digits, period=period
        ),
        lambda c: otpauth.generate_hotp(issuer, label, secret, counter=c, algorithm=algorithm, digits=digits),
    )


async def generate(
    secret: str | bytes,
    *,
    strategy: OTPType | str = OTPType.TOTP,
    counter: int | None = None,
    epoch: float | None = None,
    period: int | None = None,
    t0: int = 0,
    algorithm: str | None = None,
    digits: int | None = None,
    crypto: CryptoPlugin | None = None,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails | None = None,
) -> str:
    o = _resolve(strategy, crypto, base32, algorithm, digits, period, epoch, guardrails)
    common = dict(crypto=o.crypto, base32=o.base32, algorithm=o.algorithm, digits=o.digits, guardrails=o.guardrails)
    return await _dispatch(
        o.strategy,
        counter,
        lambda: totp.generate(secret, epoch=o.epoch, period=o.period, t0=t0, **common),
        lambda c: hotp.generate(secret, c, **common),
    )


def generate_sync(
    secret: str | bytes,
    *,
    strategy: OTPType | str = OTPType.TOTP,
    counter: int | None = None,
    epoch: float | None = None,
    period: int | None = None,
    t0: int = 0,
    algorithm: str | None = None,
    digits: int | None = None,
    crypto: CryptoPlugin | None = None,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails | None = None,
) -> str:
    o = _resolve(strategy, crypto, base32, algorithm, digits, period, epoch, guardrails)
    common = dict(crypto=o.crypto, base32=o.base32, algorithm=o.algorithm, digits=o.digits, guardrails=o.guardrails)
    return _dispatch(
        o.strategy,
        counter,
        lambda: totp.generate_sync(secret, epoch=o.epoch, period=o.period, t0=t0, **common),
        lambda c: hotp.generate_sync(secret, c, **common),
    )


async def verify(
    secret: str | bytes,
    token: str,
    *,
    strategy: OTPType | str = OTPType.TOTP,
    counter: int | None = None,
    counter_tolerance: Tolerance = 0,
    epoch: float | None = None,
    epoch_tolerance: Tolerance = 0,
    period: int | None = None,
    t0: int = 0,
    after_time_step: int | None = None,
    scan_order: ScanOrder = ScanOrder.NEAREST,
    algorithm: str | None = None,
    digits: int | None = None,
    crypto: CryptoPlugin | None = None,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails | None = None,
) -> VerifyResult:
    o = _resolve(strategy, crypto, base32, algorithm, digits, period, epoch, guardrails)
    common = dict(crypto=o.crypto, base32=o.base32, algorithm=o.algorithm, digits=o.digits, guardrails=o.guardrails)
    return await _dispatch(
        o.strategy,
        counter,
        lambda: totp.verify(
            secret,
            token,
            epoch=o.epoch,
            period=o.period,
            t0=t0,
            epoch_tolerance=epoch_tolerance,
            after_time_step=after_time_step,
            scan_order=scan_order,
            **common,
        ),
        lambda c: hotp.verify(secret, c, token, counter_tolerance=counter_tolerance, **common),
    )


def verify_sync(
    secret: str | bytes,
    token: str,
    *,
    strategy: OTPType | str = OTPType.TOTP,
    counter: int | None = None,
    counter_tolerance: Tolerance = 0,
    epoch: float | None = None,
    epoch_tolerance: Tolerance = 0,
    period: int | None = None,
    t0: int = 0,
    after_time_step: int | None = None,
    scan_order: ScanOrder = ScanOrder.NEAREST,
    algorithm: str | None = None,
    digits: int | None = None,
    crypto: CryptoPlugin | None = None,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails | None = None,
) -> VerifyResult:
    o = _resolve(strategy, crypto, base32, algorithm, digits, period, epoch, guardrails)
    common = dict(crypto=o.crypto, base32=o.base32, algorithm=o.algorithm, digits=o.digits, guardrails=o.guardrails)
    return _dispatch(
        o.strategy,
        counter,
        lambda: totp.verify_sync(
            secret,
            token,
            epoch=o.epoch,
            period=o.period,
            t0=t0,
            epoch_tolerance=epoch_tolerance,
            after_time_step=after_time_step,
            scan_order=scan_order,
            **common,
        ),
        lambda c: hotp.verify_sync(secret, c, token, counter_tolerance=counter_tolerance, **common),
    )


@dataclass(frozen=True)
class OTP:
    """Strategy, backends and guardrails bound once for repeated calls.

    Keyword arguments given to a method are passed to the matching module
    function and take precedence over the bound values::

        otp = OTP(strategy="hotp", crypto=HashlibPlugin())
        token = otp.generate_sync(secret, counter=3)
    """

    strategy: OTPType = OTPType.TOTP
    crypto: CryptoPlugin | None = None
    base32: Base32Plugin | None = None
    guardrails: Guardrails | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", _strategy(self.strategy))

    def _bind(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "crypto": self.crypto,
            "base32": self.base32,
            "guardrails": self.guardrails,
            **kwargs,
        }

    def generate_secret(self, length: int | None = None) -> str:
        return generate_secret(length, self.crypto, self.base32)

    def generate_uri(self, issuer: str | None, label: str, secret: str, **kwargs: Any) -> str:
        return generate_uri(issuer, label, secret, **{"strategy": self.strategy, **kwargs})

    async def generate(self, secret: str | bytes, **kwargs: Any) -> str:
        return await generate(secret, **self._bind(kwargs))

    def generate_sync(self, secret: str | bytes, **kwargs: Any) -> str:
        return generate_sync(secret, **self._bind(kwargs))

    async def verify(self, secret: str | bytes, token: str, **kwargs: Any) -> VerifyResult:
        return await verify(secret, token, **self._bind(kwargs))

    def verify_sync(self, secret: str | bytes, token: str, **kwargs: Any) -> VerifyResult:
        return verify_sync(secret, token, **self._bind(kwargs))
