"""
Token Manager
=============
Obtains and renews authentication tokens.
"""

import json
from typing import Optional

import structlog

from applymagicsauce.config import MagicSauceConfig
from applymagicsauce.exceptions import (
    AuthenticationFailure,
    BadRequest,
    EndpointNotFound,
    MagicSauceError,
    RenewalFailed,
    ServiceUnavailable,
    UnexpectedStatus,
)
from applymagicsauce.models import Token, parse_response
from applymagicsauce.transport import RawResponse, Transport

logger = structlog.get_logger(__name__)

AUTH_PATH = "/auth"


def _raise_for_auth_status(response: RawResponse) -> None:
    status = response.status_code
    if status == 400:
        raise BadRequest(status, response.text)
    if status == 403:
        raise AuthenticationFailure(status)
    if status == 404:
        raise EndpointNotFound(status)
    if status == 500:
        raise ServiceUnavailable(status)
    if not 200 <= status < 300:
        raise UnexpectedStatus(status, response.text)


class TokenManager:
    """Requests tokens from the ``/auth`` endpoint."""

    def __init__(self, transport: Transport, config: MagicSauceConfig):
        self.transport = transport
        self.config = config

    @property
    def can_renew(self) -> bool:
        return self.config.can_renew

    def authenticate(self, customer_id: int, api_key: Optional[str] = None) -> Token:
        """
        Get a new token for a customer.

        Args:
            customer_id: Customer identifier from the registration
            api_key: API key; the configured default key is used if omitted

        Returns:
            The issued token

        Raises:
            BadRequest: If the API rejected the request
            AuthenticationFailure: If the credentials are wrong
            EndpointNotFound: If the API URL is wrong
            ServiceUnavailable: If the API is temporarily down
            UnexpectedStatus: For any other error status
            DeserializationError: If the token could not be parsed
            TransportError: If the request could not be sent
        """
        if not api_key:
            api_key = self.config.api_key or ""

        payload = json.dumps({"customer_id": customer_id, "api_key": api_key})
        response = self.transport.post(AUTH_PATH, content=payload.encode("utf-8"))
        _raise_for_auth_status(response)

        token = parse_response(Token, response.body)
        logger.info("token_issued", customer_id=token.customer_id, expires=token.expires)
        return token

    def renew(self, token: Token) -> Token:
        """
        Renew an expired token with the configured default API key.

        The passed token is not modified.

        Returns:
            A new token with the same customer identifier

        Raises:
            RenewalFailed: If no default key is configured or
                authentication failed
        """
        if not self.can_renew:
            raise RenewalFailed("no default api key configured to renew the token")

        try:
            renewed = self.authenticate(token.customer_id, self.config.api_key)
        except MagicSauceError as e:
            logger.warning("token_renewal_failed", customer_id=token.customer_id, error=str(e))
            raise RenewalFailed(f"could not renew authentication token: {e}") from e

        logger.info("token_renewed", customer_id=token.customer_id)
        return token.refreshed(renewed)
