"""TOTP: time-based one-time passwords (RFC 6238).

The engine never reads the clock: ``epoch`` (seconds since the UNIX epoch)
is always supplied by the caller. Counters are derived from it and the
digest work is delegated to :mod:`otpkit.hotp`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

from otpkit import hotp
from otpkit.guardrails import (
    DEFAULT_GUARDRAILS,
    DEFAULT_PERIOD,
    Guardrails,
    Tolerance,
    normalize_epoch_tolerance,
    validate_algorithm,
    validate_digits,
    validate_epoch_tolerance,
    validate_period,
    validate_secret,
    validate_time,
    validate_token,
)
from otpkit.models import HashAlgorithm, ScanOrder, VerifyResult
from otpkit.plugins.base import Base32Plugin, CryptoPlugin
from otpkit.plugins.context import CryptoContext
from otpkit.secret import normalize_secret

logger = logging.getLogger(__name__)


def counter_from_epoch(epoch: float, period: int = DEFAULT_PERIOD, t0: int = 0) -> int:
    return int((epoch - t0) // period)


def scan_offsets(past_steps: int, future_steps: int, order: ScanOrder = ScanOrder.NEAREST) -> Iterator[int]:
    """Yield step offsets to try during verification.

    ``NEAREST`` yields 0, -1, +1, -2, +2, ... so a match closest in time wins
    and ties go to the past. ``CHRONOLOGICAL`` goes from oldest to newest.
    """
    if ScanOrder(order) is ScanOrder.CHRONOLOGICAL:
        yield from range(-past_steps, future_steps + 1)
        return
    yield 0
    for i in range(1, max(past_steps, future_steps) + 1):
        if i <= past_steps:
            yield -i
        if i <= future_steps:
            yield i


def _validate_clock(epoch: float, period: int, t0: int, guardrails: Guardrails) -> None:
    validate_time(epoch)
    validate_time(t0)
    validate_period(period, guardrails)


async def generate(
    secret: str | bytes,
    *,
    crypto: CryptoPlugin | None,
    epoch: float,
    period: int = DEFAULT_PERIOD,
    t0: int = 0,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> str:
    """Generate the token for the time step containing ``epoch``."""
    _validate_clock(epoch, period, t0, guardrails)
    return await hotp.generate(
        secret,
        counter_from_epoch(epoch, period, t0),
        crypto=crypto,
        algorithm=algorithm,
        digits=digits,
        base32=base32,
        guardrails=guardrails,
    )


def generate_sync(
    secret: str | bytes,
    *,
    crypto: CryptoPlugin | None,
    epoch: float,
    period: int = DEFAULT_PERIOD,
    t0: int = 0,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> str:
    _validate_clock(epoch, period, t0, guardrails)
    return hotp.generate_sync(
        secret,
        counter_from_epoch(epoch, period, t0),
        crypto=crypto,
        algorithm=algorithm,
        digits=digits,
        base32=base32,
        guardrails=guardrails,
    )


def _candidate_steps(
    epoch: float,
    period: int,
    t0: int,
    epoch_tolerance: Tolerance,
    after_time_step: int | None,
    scan_order: ScanOrder,
    guardrails: Guardrails,
) -> Iterator[tuple[int, int]]:
    """Yield ``(offset, time_step)`` pairs in scan order, skipping unusable steps."""
    current = counter_from_epoch(epoch, period, t0)
    past, future = normalize_epoch_tolerance(epoch_tolerance)
    for offset in scan_offsets(math.ceil(past / period), math.ceil(future / period), scan_order):
        step = current + offset
        if step < 0 or step > guardrails.max_counter:
            continue
        if after_time_step is not None and step <= after_time_step:
            continue
        yield offset, step


def _prepare_verify(
    secret: str | bytes,
    token: str,
    crypto: CryptoPlugin | None,
    epoch: float,
    period: int,
    t0: int,
    epoch_tolerance: Tolerance,
    algorithm: str,
    digits: int,
    base32: Base32Plugin | None,
    guardrails: Guardrails,
) -> tuple[bytes, CryptoContext]:
    secret_bytes = normalize_secret(secret, base32)
    validate_secret(secret_bytes, guardrails)
    _validate_clock(epoch, period, t0, guardrails)
    validate_algorithm(algorithm)
    validate_digits(digits)
    validate_token(token, digits)
    validate_epoch_tolerance(epoch_tolerance, period, guardrails)
    return secret_bytes, CryptoContext(crypto)


def _matched(offset: int, step: int, period: int, t0: int) -> VerifyResult:
    logger.debug("TOTP token matched at delta %d (time step %d)", offset, step)
    return VerifyResult(valid=True, delta=offset, epoch=step * period + t0, time_step=step)


async def verify(
    secret: str | bytes,
    token: str,
    *,
    crypto: CryptoPlugin | None,
    epoch: float,
    period: int = DEFAULT_PERIOD,
    t0: int = 0,
    epoch_tolerance: Tolerance = 0,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
    after_time_step: int | None = None,
    scan_order: ScanOrder = ScanOrder.NEAREST,
) -> VerifyResult:
    """Check ``token`` against the time step of ``epoch`` and its neighbours.

    ``epoch_tolerance`` is in seconds, either symmetric (int) or a
    ``(past, future)`` pair; each side is rounded up to whole periods.
    ``after_time_step`` rejects tokens from that step or earlier, so a token
    accepted once cannot be replayed within its window.
    """
    secret_bytes, ctx = _prepare_verify(
        secret, token, crypto, epoch, period, t0, epoch_tolerance, algorithm, digits, base32, guardrails
    )
    for offset, step in _candidate_steps(epoch, period, t0, epoch_tolerance, after_time_step, scan_order, guardrails):
        expected = await hotp.generate(
            secret_bytes, step, crypto=crypto, algorithm=algorithm, digits=digits, guardrails=guardrails
        )
        if ctx.constant_time_equal(expected, token):
            return _matched(offset, step, period, t0)

    logger.debug("TOTP token did not match within tolerance %s", epoch_tolerance)
    return VerifyResult(valid=False)


def verify_sync(
    secret: str | bytes,
    token: str,
    *,
    crypto: CryptoPlugin | None,
    epoch: float,
    period: int = DEFAULT_PERIOD,
    t0: int = 0,
    epoch_tolerance: Tolerance = 0,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
    after_time_step: int | None = None,
    scan_order: ScanOrder = ScanOrder.NEAREST,
) -> VerifyResult:
    secret_bytes, ctx = _prepare_verify(
        secret, token, crypto, epoch, period, t0, epoch_tolerance, algorithm, digits, base32, guardrails
    )
    for offset, step in _candidate_steps(epoch, period, t0, epoch_tolerance, after_time_step, scan_order, guardrails):
        expected = hotp.generate_sync(
            secret_bytes, step, crypto=crypto, algorithm=algorithm, digits=digits, guardrails=guardrails
        )
        if ctx.constant_time_equal(expected, token):
            return _matched(offset, step, period, t0)

    logger.debug("TOTP token did not match within tolerance %s", epoch_tolerance)
    return VerifyResult(valid=False)


def get_remaining_time(epoch: float, period: int = DEFAULT_PERIOD, t0: int = 0) -> float:
    """Seconds until the time step containing ``epoch`` ends."""
    _validate_clock(epoch, period, t0, DEFAULT_GUARDRAILS)
    return (counter_from_epoch(epoch, period, t0) + 1) * period + t0 - epoch


def get_time_step(epoch: float, period: int = DEFAULT_PERIOD, t0: int = 0) -> int:
    _validate_clock(epoch, period, t0, DEFAULT_GUARDRAILS)
    return counter_from_epoch(epoch, period, t0)
