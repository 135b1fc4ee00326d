"""Error envelope helpers and configuration errors for histogram metrics."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error contract for configuration failures."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    kind = "Envelope"

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(error=self.kind, detail=str(self), hint=self.hint)


class BadInputError(EnvelopeError):
    """Raised for malformed user input (config values, quantiles, sizes)."""

    kind = "BadInput"


class PolicyError(EnvelopeError):
    """Raised for unsupported operations or contract violations."""

    kind = "Policy"


class ConfigurationError(BadInputError):
    """Raised when a histogram cannot be built from its configuration."""

    kind = "Configuration"


class MissingNameError(ConfigurationError):
    """Raised when ``build()`` is called before a name was set."""

    kind = "MissingName"


class InvalidPercentileConfigurationError(ConfigurationError):
    """Raised when default metrics are skipped without any usable percentile."""

    kind = "InvalidPercentileConfiguration"


__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "PolicyError",
    "ConfigurationError",
    "MissingNameError",
    "InvalidPercentileConfigurationError",
]
