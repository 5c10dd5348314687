"""Validation bounds for every numeric and cryptographic OTP parameter.

Each engine operation runs the relevant ``validate_*`` functions before any
HMAC is computed, so no algorithmic code path ever sees malformed input.
Defaults follow RFC 4226 / RFC 6238 recommendations and can be relaxed or
tightened per call with :func:`create_guardrails`.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from otpkit.errors import (
    AlgorithmError,
    CounterNegativeError,
    CounterNotIntegerError,
    CounterOverflowError,
    CounterToleranceError,
    CounterToleranceNegativeError,
    CounterToleranceTooLargeError,
    DigitsError,
    EpochToleranceError,
    EpochToleranceNegativeError,
    EpochToleranceTooLargeError,
    GuardrailConfigError,
    PeriodTooLargeError,
    PeriodTooSmallError,
    SecretTooLongError,
    SecretTooShortError,
    TimeNegativeError,
    TimeNotFiniteError,
    TokenFormatError,
    TokenLengthError,
)
from otpkit.models import HashAlgorithm

logger = logging.getLogger(__name__)

MIN_SECRET_BYTES = 16  # 128 bits, RFC 4226 section 4 R6
MAX_SECRET_BYTES = 64
RECOMMENDED_SECRET_BYTES = 20  # 160 bits
MIN_PERIOD = 1
MAX_PERIOD = 3600
DEFAULT_PERIOD = 30
MAX_COUNTER = 2**63 - 1  # fits the 8-byte big-endian encoding
MAX_WINDOW = 99  # max HMAC computations per verification

SUPPORTED_DIGITS = (6, 7, 8)

Tolerance = int | tuple[int, int]


class Guardrails(BaseModel):
    """Immutable set of validation bounds."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    min_secret_bytes: int = Field(default=MIN_SECRET_BYTES, ge=1)
    max_secret_bytes: int = Field(default=MAX_SECRET_BYTES, ge=1)
    min_period: int = Field(default=MIN_PERIOD, ge=1)
    max_period: int = Field(default=MAX_PERIOD, ge=1)
    max_counter: int = Field(default=MAX_COUNTER, ge=0, le=MAX_COUNTER)
    max_window: int = Field(default=MAX_WINDOW, ge=1)

    @model_validator(mode="after")
    def _check_ranges(self) -> Guardrails:
        if self.min_secret_bytes > self.max_secret_bytes:
            raise ValueError("min_secret_bytes must be <= max_secret_bytes")
        if self.min_period > self.max_period:
            raise ValueError("min_period must be <= max_period")
        return self


DEFAULT_GUARDRAILS = Guardrails()


def create_guardrails(**overrides: Any) -> Guardrails:
    """Build guardrails from keyword overrides on top of the defaults.

    Returns the shared ``DEFAULT_GUARDRAILS`` instance when nothing is
    overridden, so :func:`has_overrides` stays cheap.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return DEFAULT_GUARDRAILS
    try:
        guardrails = Guardrails(**overrides)
    except ValidationError as e:
        raise GuardrailConfigError(f"Invalid guardrail configuration: {e}") from e
    logger.warning("Guardrail overrides in effect: %s", sorted(overrides))
    return guardrails


def has_overrides(guardrails: Guardrails) -> bool:
    return guardrails != DEFAULT_GUARDRAILS


def validate_secret(secret: bytes, guardrails: Guardrails = DEFAULT_GUARDRAILS) -> None:
    if len(secret) < guardrails.min_secret_bytes:
        raise SecretTooShortError(guardrails.min_secret_bytes, len(secret))
    if len(secret) > guardrails.max_secret_bytes:
        raise SecretTooLongError(guardrails.max_secret_bytes, len(secret))


def validate_counter(counter: int, guardrails: Guardrails = DEFAULT_GUARDRAILS) -> None:
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise CounterNotIntegerError()
    if counter < 0:
        raise CounterNegativeError()
    if counter > guardrails.max_counter:
        raise CounterOverflowError(guardrails.max_counter)


def validate_time(epoch: float) -> None:
    if isinstance(epoch, bool) or not isinstance(epoch, (int, float)) or not math.isfinite(epoch):
        raise TimeNotFiniteError()
    if epoch < 0:
        raise TimeNegativeError()


def validate_period(period: int, guardrails: Guardrails = DEFAULT_GUARDRAILS) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period < guardrails.min_period:
        raise PeriodTooSmallError(guardrails.min_period)
    if period > guardrails.max_period:
        raise PeriodTooLargeError(guardrails.max_period)


def validate_digits(digits: int) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int) or digits not in SUPPORTED_DIGITS:
        raise DigitsError(f"Digits must be 6, 7, or 8, got {digits!r}")


def validate_algorithm(algorithm: str) -> HashAlgorithm:
    """Return the algorithm as a :class:`HashAlgorithm`, raising if unsupported."""
    try:
        return HashAlgorithm(str(algorithm).lower())
    except ValueError:
        raise AlgorithmError(
            f"Algorithm must be one of 'sha1', 'sha256', or 'sha512', got {algorithm!r}"
        ) from None


def validate_token(token: str, digits: int) -> None:
    if not isinstance(token, str):
        raise TokenFormatError()
    if len(token) != digits:
        raise TokenLengthError(digits, len(token))
    # str.isdigit() alone accepts non-ASCII digits such as "١"
    if not (token.isascii() and token.isdigit()):
        raise TokenFormatError()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_pair(tolerance: Tolerance, default_past: int | None) -> tuple[Any, Any]:
    if isinstance(tolerance, (tuple, list)):
        if len(tolerance) != 2:
            raise ValueError("tolerance pair must have exactly two values")
        return tolerance[0], tolerance[1]
    return (tolerance if default_past is None else default_past), tolerance


def normalize_counter_tolerance(tolerance: Tolerance = 0) -> tuple[int, int]:
    """An int means look-ahead only: ``n`` becomes ``(0, n)``."""
    return _as_pair(tolerance, default_past=0)


def normalize_epoch_tolerance(tolerance: Tolerance = 0) -> tuple[int, int]:
    """An int means symmetric: ``n`` becomes ``(n, n)``."""
    return _as_pair(tolerance, default_past=None)


def validate_counter_tolerance(
    tolerance: Tolerance,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> None:
    try:
        past, future = normalize_counter_tolerance(tolerance)
    except ValueError as e:
        raise CounterToleranceError(str(e)) from None
    if not (_is_int(past) and _is_int(future)):
        raise CounterToleranceError("Counter tolerance values must be integers")
    if past < 0 or future < 0:
        raise CounterToleranceNegativeError()
    total_checks = past + future + 1
    if total_checks > guardrails.max_window:
        raise CounterToleranceTooLargeError(guardrails.max_window, total_checks)


def validate_epoch_tolerance(
    tolerance: Tolerance,
    period: int = DEFAULT_PERIOD,
    guardrails: Guardrails = DEFAULT_GUARDRAILS,
) -> None:
    try:
        past, future = normalize_epoch_tolerance(tolerance)
    except ValueError as e:
        raise EpochToleranceError(str(e)) from None
    if not (_is_int(past) and _is_int(future)):
        raise EpochToleranceError("Epoch tolerance values must be integers")
    if past < 0 or future < 0:
        raise EpochToleranceNegativeError()

    # max_window checks leave room for max_window - 1 periods around the current step
    max_seconds = (guardrails.max_window - 1) * period
    if max(past, future) > max_seconds:
        raise EpochToleranceTooLargeError(max_seconds, max(past, future))
    if past + future > max_seconds:
        raise EpochToleranceTooLargeError(max_seconds, past + future)
    # each side rounds up to whole steps
    if math.ceil(past / period) + math.ceil(future / period) + 1 > guardrails.max_window:
        raise EpochToleranceTooLargeError(max_seconds, past + future)
