"""Central configuration loaded from environment variables and YAML files.

Only the top-level facade (:mod:`otpkit.otp`) reads these settings; the
HOTP/TOTP engines take every parameter explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from otpkit.errors import GuardrailConfigError
from otpkit.guardrails import (
    DEFAULT_PERIOD,
    MAX_COUNTER,
    MAX_PERIOD,
    MAX_SECRET_BYTES,
    MAX_WINDOW,
    MIN_PERIOD,
    MIN_SECRET_BYTES,
    RECOMMENDED_SECRET_BYTES,
    Guardrails,
    create_guardrails,
)
from otpkit.models import HashAlgorithm

_GUARDRAIL_FIELDS = (
    "min_secret_bytes",
    "max_secret_bytes",
    "min_period",
    "max_period",
    "max_counter",
    "max_window",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OTPKIT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Token defaults
    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    digits: int = Field(default=6, ge=6, le=8)
    period: int = DEFAULT_PERIOD
    secret_length: int = RECOMMENDED_SECRET_BYTES

    # Guardrails
    min_secret_bytes: int = MIN_SECRET_BYTES
    max_secret_bytes: int = MAX_SECRET_BYTES
    min_period: int = MIN_PERIOD
    max_period: int = MAX_PERIOD
    max_counter: int = MAX_COUNTER
    max_window: int = MAX_WINDOW
    guardrails_file: Path | None = None

    _guardrails: Guardrails | None = PrivateAttr(default=None)

    def guardrails(self) -> Guardrails:
        """Guardrails from these settings, with the YAML profile (if any) on top.

        Built once per instance; the YAML file is not re-read afterwards.
        """
        if self._guardrails is not None:
            return self._guardrails
        values: dict[str, Any] = {
            name: getattr(self, name)
            for name in _GUARDRAIL_FIELDS
            if getattr(self, name) != Guardrails.model_fields[name].default
        }
        if self.guardrails_file is not None:
            values.update(load_guardrails_file(self.guardrails_file))
        self._guardrails = create_guardrails(**values)
        return self._guardrails


def load_guardrails_file(path: Path | str) -> dict[str, Any]:
    """Load guardrail overrides from a YAML mapping.

    Keys are guardrail field names, e.g.::

        min_secret_bytes: 10
        max_window: 20
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Guardrails file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise GuardrailConfigError(f"Guardrails file must contain a mapping: {path}")
    unknown = set(data) - set(_GUARDRAIL_FIELDS)
    if unknown:
        raise GuardrailConfigError(f"Unknown guardrail(s) in {path}: {', '.join(sorted(unknown))}")
    return data


settings = Settings()
