"""otpkit: HOTP/TOTP one-time passwords with pluggable crypto and Base32 backends."""

from otpkit.errors import OTPError
from otpkit.guardrails import DEFAULT_GUARDRAILS, Guardrails, create_guardrails
from otpkit.models import HashAlgorithm, OTPAuthParams, OTPAuthURI, OTPType, ScanOrder, VerifyResult
from otpkit.otp import OTP, generate, generate_secret, generate_sync, generate_uri, verify, verify_sync
from otpkit.utils import wrap_result, wrap_result_async

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_GUARDRAILS",
    "Guardrails",
    "HashAlgorithm",
    "OTP",
    "OTPAuthParams",
    "OTPAuthURI",
    "OTPError",
    "OTPType",
    "ScanOrder",
    "VerifyResult",
    "create_guardrails",
    "generate",
    "generate_secret",
    "generate_sync",
    "generate_uri",
    "verify",
    "verify_sync",
    "wrap_result",
    "wrap_result_async",
]
