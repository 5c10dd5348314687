"""Tests for otpauth:// URI parsing and generation."""

from __future__ import annotations

import pytest

from otpkit import uri
from otpkit.errors import (
    AlgorithmError,
    ConfigurationError,
    CounterNegativeError,
    DigitsError,
    InvalidParameterError,
    InvalidURIError,
    LabelMissingError,
    MissingParameterError,
    PeriodTooSmallError,
    SecretMissingError,
    URIParseError,
)
from otpkit.models import HashAlgorithm, OTPAuthParams, OTPAuthURI, OTPType

SECRET = "JBSWY3DPEHPK3PXP"


def test_generate_totp_minimal():
    assert (
        uri.generate_totp("ACME Co", "john@example.com", SECRET)
        == "otpauth://totp/ACME%20Co:john%40example.com?secret=JBSWY3DPEHPK3PXP&issuer=ACME%20Co"
    )


def test_generate_totp_non_defaults():
    result = uri.generate_totp("Example", "alice", SECRET, algorithm="sha256", digits=8, period=60)
    assert result == (
        "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP&issuer=Example"
        "&algorithm=SHA256&digits=8&period=60"
    )


def test_generate_totp_without_issuer():
    assert uri.generate_totp(None, "alice", SECRET) == "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP"


def test_generate_hotp_always_has_counter():
    assert uri.generate_hotp("Example", "alice", SECRET) == (
        "otpauth://hotp/Example:alice?secret=JBSWY3DPEHPK3PXP&issuer=Example&counter=0"
    )
    assert uri.generate_hotp("Example", "alice", SECRET, counter=42).endswith("&counter=42")


def test_generate_validates_inputs():
    with pytest.raises(LabelMissingError):
        uri.generate_totp("Example", "", SECRET)
    with pytest.raises(SecretMissingError):
        uri.generate_totp("Example", "alice", "")
    with pytest.raises(DigitsError):
        uri.generate_totp("Example", "alice", SECRET, digits=9)
    with pytest.raises(AlgorithmError):
        uri.generate_totp("Example", "alice", SECRET, algorithm="md5")


def test_parse_fills_defaults():
    parsed = uri.parse("otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP")
    assert parsed.type == OTPType.TOTP
    assert parsed.label == "Example:alice"
    assert parsed.params.secret == SECRET
    assert parsed.params.issuer is None
    assert parsed.params.algorithm == HashAlgorithm.SHA1
    assert parsed.params.digits == 6
    assert parsed.params.period == 30
    assert parsed.params.counter is None

    hotp = uri.parse("otpauth://hotp/alice?secret=JBSWY3DPEHPK3PXP")
    assert hotp.params.counter == 0
    assert hotp.params.period is None


def test_parse_all_parameters():
    parsed = uri.parse(
        "otpauth://hotp/ACME%20Co:john%40example.com?secret=JBSWY3DPEHPK3PXP"
        "&issuer=ACME%20Co&algorithm=SHA-512&digits=8&counter=17"
    )
    assert parsed.label == "ACME Co:john@example.com"
    assert parsed.params.issuer == "ACME Co"
    assert parsed.params.algorithm == HashAlgorithm.SHA512
    assert parsed.params.digits == 8
    assert parsed.params.counter == 17


def test_parse_ignores_unknown_and_valueless_parameters():
    parsed = uri.parse("otpauth://totp/alice?image=x&flag&secret=JBSWY3DPEHPK3PXP")
    assert parsed.params.secret == SECRET


def test_round_trip_preserves_uri():
    original = OTPAuthURI(
        type=OTPType.TOTP,
        label="ACME Co:john@example.com",
        params=OTPAuthParams(secret=SECRET, issuer="ACME Co", algorithm=HashAlgorithm.SHA256, digits=7, period=45),
    )
    assert uri.parse(uri.generate(original)) == original


@pytest.mark.parametrize(
    "value",
    [
        "http://totp/alice?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp",
        "otpauth://motp/alice?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/%FF?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/" + "a" * 2100,
    ],
)
def test_parse_rejects_malformed_uris(value):
    with pytest.raises(InvalidURIError):
        uri.parse(value)


def test_parse_requires_secret():
    with pytest.raises(MissingParameterError):
        uri.parse("otpauth://totp/alice?issuer=Example")
    with pytest.raises(MissingParameterError):
        uri.parse("otpauth://totp/alice?secret=")


@pytest.mark.parametrize(
    "otp_type,query",
    [
        ("totp", "algorithm=MD5"),
        ("totp", "digits=5"),
        ("totp", "digits=six"),
        ("hotp", "counter=-1"),
        ("hotp", "counter=9223372036854775808"),
        ("totp", "period=0"),
        ("totp", "period=3601"),
        ("totp", "period=abc"),
    ],
)
def test_parse_rejects_invalid_parameters(otp_type, query):
    with pytest.raises(InvalidParameterError):
        uri.parse(f"otpauth://{otp_type}/alice?secret=JBSWY3DPEHPK3PXP&{query}")


def test_parse_errors_share_base_class():
    with pytest.raises(URIParseError):
        uri.parse("otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP&digits=5")


def test_split_label():
    assert uri.split_label("ACME Co:john@example.com") == ("ACME Co", "john@example.com")
    assert uri.split_label("ACME Co: john") == ("ACME Co", "john")
    assert uri.split_label("john") == (None, "john")


def test_round_trip_hotp():
    original = OTPAuthURI(
        type=OTPType.HOTP,
        label="Example:alice",
        params=OTPAuthParams(secret=SECRET, issuer="Example", algorithm=HashAlgorithm.SHA1, digits=6, counter=0),
    )
    generated = uri.generate(original)
    assert "counter=0" in generated
    assert uri.parse(generated) == original

    bumped = original.model_copy(update={"params": original.params.model_copy(update={"counter": 99})})
    assert uri.parse(uri.generate(bumped)).params.counter == 99


def test_round_trip_all_defaults():
    original = OTPAuthURI(type=OTPType.TOTP, label="alice", params=OTPAuthParams(secret=SECRET, period=30))
    generated = uri.generate(original)
    assert generated == "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP"
    parsed = uri.parse(generated)
    assert parsed == original
    assert parsed.params.algorithm == HashAlgorithm.SHA1
    assert parsed.params.digits == 6
    assert parsed.params.period == 30
    assert uri.generate(parsed) == generated


@pytest.mark.parametrize(
    "issuer,account",
    [
        ("R&D", "a/b?c"),
        ("100% Co", "x+y@example.com"),
        ("Zürich Bank", "用户"),
        ("A=B", "#tag"),
    ],
)
def test_round_trip_reserved_characters(issuer, account):
    generated = uri.generate_totp(issuer, account, SECRET)
    parsed = uri.parse(generated)
    assert parsed.label == f"{issuer}:{account}"
    assert parsed.params.issuer == issuer
    assert uri.split_label(parsed.label) == (issuer, account)
    assert uri.generate(parsed) == generated


def test_generate_rejects_fields_of_other_type():
    with pytest.raises(ConfigurationError):
        uri.generate(
            OTPAuthURI(type=OTPType.HOTP, label="alice", params=OTPAuthParams(secret=SECRET, counter=1, period=60))
        )
    with pytest.raises(ConfigurationError):
        uri.generate(
            OTPAuthURI(type=OTPType.TOTP, label="alice", params=OTPAuthParams(secret=SECRET, counter=1, period=30))
        )


def test_generate_validates_period_and_counter():
    with pytest.raises(PeriodTooSmallError):
        uri.generate(OTPAuthURI(type=OTPType.TOTP, label="alice", params=OTPAuthParams(secret=SECRET, period=0)))
    with pytest.raises(CounterNegativeError):
        uri.generate(OTPAuthURI(type=OTPType.HOTP, label="alice", params=OTPAuthParams(secret=SECRET, counter=-1)))


def test_parse_drops_fields_of_other_type():
    totp = uri.parse("otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP&counter=5")
    assert totp.params.counter is None
    assert uri.parse(uri.generate(totp)) == totp

    hotp = uri.parse("otpauth://hotp/alice?secret=JBSWY3DPEHPK3PXP&counter=5&period=60")
    assert hotp.params.period is None
    assert hotp.params.counter == 5
    assert uri.parse(uri.generate(hotp)) == hotp
