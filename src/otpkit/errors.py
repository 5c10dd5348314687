"""Error taxonomy for otpkit.

Errors are grouped by origin (parameter, backend, plugin, configuration,
URI) so callers can catch a whole category with one ``except`` clause.
Every error derives from :class:`OTPError`.
"""

from __future__ import annotations


class OTPError(Exception):
    """Base class for every error raised by otpkit."""


# === Parameter errors ===


class SecretError(OTPError):
    pass


class SecretTooShortError(SecretError):
    def __init__(self, min_bytes: int, actual_bytes: int) -> None:
        super().__init__(
            f"Secret must be at least {min_bytes} bytes ({min_bytes * 8} bits), got {actual_bytes} bytes"
        )
        self.min_bytes = min_bytes
        self.actual_bytes = actual_bytes


class SecretTooLongError(SecretError):
    def __init__(self, max_bytes: int, actual_bytes: int) -> None:
        super().__init__(f"Secret must not exceed {max_bytes} bytes, got {actual_bytes} bytes")
        self.max_bytes = max_bytes
        self.actual_bytes = actual_bytes


class CounterError(OTPError):
    pass


class CounterNegativeError(CounterError):
    def __init__(self) -> None:
        super().__init__("Counter must be non-negative")


class CounterOverflowError(CounterError):
    def __init__(self, max_counter: int) -> None:
        super().__init__(f"Counter must not exceed {max_counter}")
        self.max_counter = max_counter


class CounterNotIntegerError(CounterError):
    def __init__(self) -> None:
        super().__init__("Counter must be an integer")


class TimeError(OTPError):
    pass


class TimeNegativeError(TimeError):
    def __init__(self) -> None:
        super().__init__("Time must be non-negative")


class TimeNotFiniteError(TimeError):
    def __init__(self) -> None:
        super().__init__("Time must be a finite number")


class PeriodError(OTPError):
    pass


class PeriodTooSmallError(PeriodError):
    def __init__(self, min_period: int) -> None:
        super().__init__(f"Period must be an integer of at least {min_period} second(s)")
        self.min_period = min_period


class PeriodTooLargeError(PeriodError):
    def __init__(self, max_period: int) -> None:
        super().__init__(f"Period must not exceed {max_period} seconds")
        self.max_period = max_period


class DigitsError(OTPError):
    pass


class AlgorithmError(OTPError):
    pass


class TokenError(OTPError):
    pass


class TokenLengthError(TokenError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Token must be {expected} digits, got {actual}")
        self.expected = expected
        self.actual = actual


class TokenFormatError(TokenError):
    def __init__(self) -> None:
        super().__init__("Token must contain only digits")


class CounterToleranceError(OTPError):
    pass


class CounterToleranceNegativeError(CounterToleranceError):
    def __init__(self) -> None:
        super().__init__("Counter tolerance cannot contain negative values")


class CounterToleranceTooLargeError(CounterToleranceError):
    def __init__(self, max_window: int, total_checks: int) -> None:
        super().__init__(
            f"Counter tolerance requires {total_checks} checks, which exceeds MAX_WINDOW ({max_window})"
        )
        self.max_window = max_window
        self.total_checks = total_checks


class EpochToleranceError(OTPError):
    pass


class EpochToleranceNegativeError(EpochToleranceError):
    def __init__(self) -> None:
        super().__init__("Epoch tolerance cannot contain negative values")


class EpochToleranceTooLargeError(EpochToleranceError):
    def __init__(self, max_tolerance: int, actual: int) -> None:
        super().__init__(f"Epoch tolerance must not exceed {max_tolerance} seconds, got {actual}")
        self.max_tolerance = max_tolerance
        self.actual = actual


# === Backend errors ===
# The underlying plugin failure is attached as ``__cause__``.


class CryptoError(OTPError):
    pass


class HMACError(CryptoError):
    def __init__(self, message: str) -> None:
        super().__init__(f"HMAC computation failed: {message}")


class RandomBytesError(CryptoError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Random byte generation failed: {message}")


class Base32Error(OTPError):
    pass


class Base32EncodeError(Base32Error):
    def __init__(self, message: str) -> None:
        super().__init__(f"Base32 encoding failed: {message}")


class Base32DecodeError(Base32Error):
    def __init__(self, message: str) -> None:
        super().__init__(f"Base32 decoding failed: {message}")


# === Plugin-missing errors ===


class PluginError(OTPError):
    pass


class CryptoPluginMissingError(PluginError):
    def __init__(self) -> None:
        super().__init__("Crypto plugin is required")


class Base32PluginMissingError(PluginError):
    def __init__(self) -> None:
        super().__init__("Base32 plugin is required to decode a text secret")


# === Configuration errors ===


class ConfigurationError(OTPError):
    pass


class SecretMissingError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Secret is required. Use generate_secret() to create one")


class LabelMissingError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Label is required for URI generation, e.g. 'user@example.com'")


class GuardrailConfigError(ConfigurationError):
    pass


# === URI errors ===


class URIParseError(OTPError):
    pass


class InvalidURIError(URIParseError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid otpauth URI: {detail}")


class MissingParameterError(URIParseError):
    def __init__(self, param: str) -> None:
        super().__init__(f"Missing required parameter: {param}")
        self.param = param


class InvalidParameterError(URIParseError):
    def __init__(self, param: str, value: str) -> None:
        super().__init__(f"Invalid value for parameter '{param}': {value}")
        self.param = param
        self.value = value
