"""Tests for Pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from otpkit.models import HashAlgorithm, OTPAuthParams, OTPAuthURI, OTPType, ScanOrder, VerifyResult


def test_hash_algorithm_enum():
    assert HashAlgorithm.SHA1 == "sha1"
    assert HashAlgorithm("sha512") is HashAlgorithm.SHA512
    assert len(HashAlgorithm) == 3


def test_otp_type_enum():
    assert OTPType.HOTP == "hotp"
    assert OTPType.TOTP == "totp"
    assert len(ScanOrder) == 2


def test_verify_result_truthiness():
    assert VerifyResult(valid=True, delta=0)
    assert not VerifyResult(valid=False)
    assert VerifyResult(valid=False).delta is None


def test_verify_result_is_frozen():
    result = VerifyResult(valid=True, delta=1, epoch=30, time_step=1)
    with pytest.raises(ValidationError):
        result.valid = False


def test_otpauth_params_defaults():
    params = OTPAuthParams(secret="JBSWY3DPEHPK3PXP")
    assert params.algorithm == HashAlgorithm.SHA1
    assert params.digits == 6
    assert params.issuer is None
    assert params.counter is None
    assert params.period is None


def test_otpauth_uri_coerces_enums():
    u = OTPAuthURI(type="hotp", label="alice", params=OTPAuthParams(secret="X", algorithm="sha256", counter=3))
    assert u.type is OTPType.HOTP
    assert u.params.algorithm is HashAlgorithm.SHA256
