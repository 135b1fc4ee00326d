"""Error contracts for histometrics."""

from .error import (
    BadInputError,
    ConfigurationError,
    EnvelopeError,
    ErrorEnvelope,
    InvalidPercentileConfigurationError,
    MissingNameError,
    PolicyError,
)

__all__ = [
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "PolicyError",
    "ConfigurationError",
    "MissingNameError",
    "InvalidPercentileConfigurationError",
]
