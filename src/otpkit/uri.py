"""Parse and build ``otpauth://`` provisioning URIs.

Format (Google Authenticator Key Uri Format)::

    otpauth://TYPE/LABEL?secret=BASE32&issuer=ISSUER&algorithm=SHA1&digits=6&counter=N&period=30

``:`` in the label separates issuer and account; it is never percent-encoded
on output and is accepted unescaped on input.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

from otpkit.errors import (
    ConfigurationError,
    InvalidParameterError,
    InvalidURIError,
    LabelMissingError,
    MissingParameterError,
    OTPError,
    SecretMissingError,
)
from otpkit.guardrails import (
    DEFAULT_PERIOD,
    validate_algorithm,
    validate_counter,
    validate_digits,
    validate_period,
)
from otpkit.models import HashAlgorithm, OTPAuthParams, OTPAuthURI, OTPType

SCHEME = "otpauth://"

# Upper bounds on untrusted input sizes
MAX_URI_LENGTH = 2048
MAX_LABEL_LENGTH = 512
MAX_PARAM_VALUE_LENGTH = 1024
MAX_PARAM_KEY_LENGTH = 64

# Characters encodeURIComponent leaves alone besides [A-Za-z0-9_.~-]
_COMPONENT_SAFE = "!*'()"


def _decode(text: str, max_length: int, context: str) -> str:
    if len(text) > max_length * 3:
        raise InvalidURIError(f"{context} exceeds maximum length")
    try:
        decoded = unquote(text, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidURIError(f"invalid percent-encoding in {context}: {e}") from e
    if len(decoded) > max_length:
        raise InvalidURIError(f"{context} exceeds maximum length of {max_length} characters")
    return decoded


def _is_decimal(value: str) -> bool:
    return value.isascii() and value.isdigit()


def _parse_algorithm(value: str) -> HashAlgorithm:
    try:
        return validate_algorithm(value.replace("-", ""))
    except OTPError:
        raise InvalidParameterError("algorithm", value) from None


def _parse_digits(value: str) -> int:
    try:
        digits = int(value) if _is_decimal(value) else -1
        validate_digits(digits)
    except OTPError:
        raise InvalidParameterError("digits", value) from None
    return digits


def _parse_counter(value: str) -> int:
    if not _is_decimal(value):
        raise InvalidParameterError("counter", value)
    counter = int(value)
    try:
        validate_counter(counter)
    except OTPError:
        raise InvalidParameterError("counter", value) from None
    return counter


def _parse_period(value: str) -> int:
    period = int(value) if _is_decimal(value) else 0
    try:
        validate_period(period)
    except OTPError:
        raise InvalidParameterError("period", value) from None
    return period


def parse(uri: str) -> OTPAuthURI:
    """Parse an ``otpauth://`` URI, filling protocol defaults for absent parameters."""
    if len(uri) > MAX_URI_LENGTH:
        raise InvalidURIError(f"URI exceeds maximum length of {MAX_URI_LENGTH} characters")
    if not uri.startswith(SCHEME):
        raise InvalidURIError("scheme must be otpauth://")

    rest = uri[len(SCHEME):]
    type_, slash, rest = rest.partition("/")
    if not slash:
        raise InvalidURIError("missing label path")
    try:
        otp_type = OTPType(type_)
    except ValueError:
        raise InvalidURIError(f"type must be 'hotp' or 'totp', got {type_!r}") from None

    raw_label, _, query = rest.partition("?")
    label = _decode(raw_label, MAX_LABEL_LENGTH, "label")

    values: dict[str, str] = {}
    for pair in query.split("&") if query else []:
        raw_key, eq, raw_value = pair.partition("=")
        if not eq:
            continue
        key = _decode(raw_key, MAX_PARAM_KEY_LENGTH, "parameter key")
        values[key] = _decode(raw_value, MAX_PARAM_VALUE_LENGTH, f"parameter '{key}'")

    if not values.get("secret"):
        raise MissingParameterError("secret")

    params = OTPAuthParams(
        secret=values["secret"],
        issuer=values.get("issuer"),
        algorithm=_parse_algorithm(values["algorithm"]) if "algorithm" in values else HashAlgorithm.SHA1,
        digits=_parse_digits(values["digits"]) if "digits" in values else 6,
        counter=_parse_counter(values.get("counter", "0")) if otp_type == OTPType.HOTP else None,
        period=_parse_period(values.get("period", str(DEFAULT_PERIOD))) if otp_type == OTPType.TOTP else None,
    )
    return OTPAuthURI(type=otp_type, label=label, params=params)


def generate(uri: OTPAuthURI) -> str:
    """Serialize ``uri``, omitting parameters that equal their defaults."""
    params = uri.params
    if not params.secret:
        raise SecretMissingError()
    validate_digits(params.digits)
    if uri.type == OTPType.HOTP:
        if params.period is not None:
            raise ConfigurationError("period is only valid for TOTP URIs")
        validate_counter(params.counter or 0)
    else:
        if params.counter is not None:
            raise ConfigurationError("counter is only valid for HOTP URIs")
        if params.period is not None:
            validate_period(params.period)

    label = quote(uri.label, safe=":" + _COMPONENT_SAFE)
    query = [f"secret={params.secret}"]
    if params.issuer:
        query.append(f"issuer={quote(params.issuer, safe=_COMPONENT_SAFE)}")
    if params.algorithm != HashAlgorithm.SHA1:
        query.append(f"algorithm={params.algorithm.value.upper()}")
    if params.digits != 6:
        query.append(f"digits={params.digits}")
    if uri.type == OTPType.HOTP:
        query.append(f"counter={params.counter or 0}")
    elif params.period is not None and params.period != DEFAULT_PERIOD:
        query.append(f"period={params.period}")

    return f"{SCHEME}{uri.type.value}/{label}?{'&'.join(query)}"


def _full_label(issuer: str | None, label: str) -> str:
    if not label:
        raise LabelMissingError()
    return f"{issuer}:{label}" if issuer else label


def generate_totp(
    issuer: str | None,
    label: str,
    secret: str,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
    period: int = DEFAULT_PERIOD,
) -> str:
    """Build a TOTP URI with an ``issuer:label`` label."""
    return generate(
        OTPAuthURI(
            type=OTPType.TOTP,
            label=_full_label(issuer, label),
            params=OTPAuthParams(
                secret=secret,
                issuer=issuer or None,
                algorithm=validate_algorithm(algorithm),
                digits=digits,
                period=period,
            ),
        )
    )


def generate_hotp(
    issuer: str | None,
    label: str,
    secret: str,
    counter: int = 0,
    algorithm: str = HashAlgorithm.SHA1,
    digits: int = 6,
) -> str:
    """Build an HOTP URI with an ``issuer:label`` label."""
    return generate(
        OTPAuthURI(
            type=OTPType.HOTP,
            label=_full_label(issuer, label),
            params=OTPAuthParams(
                secret=secret,
                issuer=issuer or None,
                algorithm=validate_algorithm(algorithm),
                digits=digits,
                counter=counter,
            ),
        )
    )


def split_label(label: str) -> tuple[str | None, str]:
    """Split ``issuer:account`` into its parts; the issuer is None if absent."""
    issuer, sep, account = label.partition(":")
    if not sep:
        return None, label
    return issuer.strip(), account.strip()
