"""HOTP: HMAC-based one-time passwords (RFC 4226).

Every operation comes in two flavours: a coroutine (``generate``,
``verify``) that works with synchronous and asynchronous crypto backends,
and a ``*_sync`` function that fails fast with ``HMACError`` when handed an
asynchronous backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from otpkit.guardrails import (
    DEFAULT_GUARDRAILS,
    Guardrails,
    Tolerance,
    normalize_counter_tolerance,
    validate_algorithm,
    validate_counter,
    validate_counter_tolerance,
    validate_digits,
    validate_secret,
    validate_token,
)
from otpkit.models import HashAlgorithm, VerifyResult
from otpkit.plugins.base import Base32Plugin, CryptoPlugin
from otpkit.plugins.context import CryptoContext
from otpkit.secret import normalize_secret
from otpkit.utils import counter_to_bytes, dynamic_truncate, truncate_digits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Params:
    ctx: CryptoContext
    secret: bytes
    algorithm: HashAlgorithm
    digits: int


def _prepare(
    secret: str | bytes,
    crypto: CryptoPlugin | None,
    algorithm: str,
    digits: int,
    base32: Base32Plugin | None,
    guardrails: Guardrails,
) -> _Params:
    secret_bytes = normalize_secret(secret, base32)
    validate_secret(secret_bytes, guardrails)
    alg = validate_algorithm(algorithm)
    validate_digits(digits)
    return _Params(CryptoContext(crypto), secret_bytes, alg, digits)


def _token_from_digest(digest: bytes, digits: int) -> str:
    return truncate_digits(dynamic_truncate(digest), digits)


def _offsets(tolerance: Tolerance) -> range:
    past, future = normalize_counter_tolerance(tolerance)
    return range(-past, future + 1)


def _in_range(counter: int, guardrails: Guardrails) -> bool:
    return 0 <= counter <= guardrails.max_counter


async def generate(
    secret: str | bytes,
    counter: int,
    *,
    crypto: CryptoPlugin | None,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> str:
    """Generate the HOTP token for ``counter``."""
    p = _prepare(secret, crypto, algorithm, digits, base32, guardrails)
    validate_counter(counter, guardrails)
    digest = await p.ctx.hmac(p.algorithm, p.secret, counter_to_bytes(counter))
    return _token_from_digest(digest, p.digits)


def generate_sync(
    secret: str | bytes,
    counter: int,
    *,
    crypto: CryptoPlugin | None,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> str:
    p = _prepare(secret, crypto, algorithm, digits, base32, guardrails)
    validate_counter(counter, guardrails)
    digest = p.ctx.hmac_sync(p.algorithm, p.secret, counter_to_bytes(counter))
    return _token_from_digest(digest, p.digits)


async def verify(
    secret: str | bytes,
    counter: int,
    token: str,
    *,
    crypto: CryptoPlugin | None,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    counter_tolerance: Tolerance = 0,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> VerifyResult:
    """Check ``token`` against ``counter`` and the counters after it.

    An integer ``counter_tolerance`` only looks ahead: ``5`` checks
    ``counter .. counter + 5``. A ``(past, future)`` pair also looks back.
    On success the caller should store ``counter + delta + 1`` as the next
    expected counter so the same token cannot be replayed.
    """
    p = _prepare(secret, crypto, algorithm, digits, base32, guardrails)
    validate_counter(counter, guardrails)
    validate_token(token, digits)
    validate_counter_tolerance(counter_tolerance, guardrails)

    for offset in _offsets(counter_tolerance):
        current = counter + offset
        if not _in_range(current, guardrails):
            continue
        digest = await p.ctx.hmac(p.algorithm, p.secret, counter_to_bytes(current))
        if p.ctx.constant_time_equal(_token_from_digest(digest, p.digits), token):
            logger.debug("HOTP token matched at delta %d", offset)
            return VerifyResult(valid=True, delta=offset)

    logger.debug("HOTP token did not match within tolerance %s", counter_tolerance)
    return VerifyResult(valid=False)


def verify_sync(
    secret: str | bytes,
    counter: int,
    token: str,
    *,
    crypto: CryptoPlugin | None,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    counter_tolerance: Tolerance = 0,
    base32: Base32Plugin | None = None,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> VerifyResult:
    p = _prepare(secret, crypto, algorithm, digits, base32, guardrails)
    validate_counter(counter, guardrails)
    validate_token(token, digits)
    validate_counter_tolerance(counter_tolerance, guardrails)

    for offset in _offsets(counter_tolerance):
        current = counter + offset
        if not _in_range(current, guardrails):
            continue
        digest = p.ctx.hmac_sync(p.algorithm, p.secret, counter_to_bytes(current))
        if p.ctx.constant_time_equal(_token_from_digest(digest, p.digits), token):
            logger.debug("HOTP token matched at delta %d", offset)
            return VerifyResult(valid=True, delta=offset)

    logger.debug("HOTP token did not match within tolerance %s", counter_tolerance)
    return VerifyResult(valid=False)
