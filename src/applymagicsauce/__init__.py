"""
Apply Magic Sauce
=================
Python client for the Apply Magic Sauce personality prediction API.
"""

from applymagicsauce.auth import TokenManager
from applymagicsauce.client import MagicSauceClient
from applymagicsauce.config import MagicSauceConfig
from applymagicsauce.exceptions import (
    APIError,
    AuthenticationFailure,
    BadRequest,
    DeserializationError,
    EndpointNotFound,
    MagicSauceError,
    RenewalFailed,
    ServiceUnavailable,
    TokenExpired,
    TransportError,
    UnexpectedStatus,
    UsageLimitExceeded,
)
from applymagicsauce.models import (
    Contributor,
    Interpretation,
    Prediction,
    PredictionResult,
    Token,
    UsageLimit,
)
from applymagicsauce.options import (
    OptionKey,
    PredictionOptions,
    Source,
    like_ids_options,
    text_options,
)
from applymagicsauce.transport import RawResponse, Transport

__version__ = "1.0.0"

__all__ = [
    "MagicSauceClient",
    "MagicSauceConfig",
    "TokenManager",
    "Transport",
    "RawResponse",
    "Token",
    "UsageLimit",
    "PredictionResult",
    "Prediction",
    "Interpretation",
    "Contributor",
    "PredictionOptions",
    "OptionKey",
    "Source",
    "text_options",
    "like_ids_options",
    "MagicSauceError",
    "TransportError",
    "APIError",
    "BadRequest",
    "AuthenticationFailure",
    "TokenExpired",
    "EndpointNotFound",
    "UsageLimitExceeded",
    "ServiceUnavailable",
    "UnexpectedStatus",
    "RenewalFailed",
    "DeserializationError",
]
