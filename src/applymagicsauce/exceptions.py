"""
Exceptions
==========
Errors raised by the Apply Magic Sauce client.
"""

from typing import Optional


class MagicSauceError(Exception):
    """Base class for all client errors."""


class TransportError(MagicSauceError):
    """The request could not be completed (connection failure or timeout)."""


class APIError(MagicSauceError):
    """
    The API answered with an error status.

    Attributes:
        status_code: HTTP status code of the response
        detail: Response body, when the API sent one
    """

    default_message = "api error"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail or None
        super().__init__(self._format())

    def _format(self) -> str:
        if self.detail:
            return f"{self.default_message}: {self.detail}"
        return self.default_message


class BadRequest(APIError):
    default_message = "bad request"


class AuthenticationFailure(APIError):
    default_message = "authentication failure"


class TokenExpired(APIError):
    default_message = "authentication token expired"


class EndpointNotFound(APIError):
    default_message = "endpoint not found"


class UsageLimitExceeded(APIError):
    default_message = "usage limit exceeded"


class ServiceUnavailable(APIError):
    default_message = "api is temporarily not available"


class UnexpectedStatus(APIError):
    default_message = "unexpected response status"

    def _format(self) -> str:
        message = f"{self.default_message} {self.status_code}"
        if self.detail:
            return f"{message}: {self.detail}"
        return message


class RenewalFailed(MagicSauceError):
    """An expired token could not be renewed."""


class DeserializationError(MagicSauceError):
    """A successful response body could not be parsed."""
