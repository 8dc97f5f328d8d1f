"""
Apply Magic Sauce Client
========================
Main client for the prediction endpoints.
"""

import json
import threading
from collections.abc import Iterable
from typing import Any, Optional, Union

import httpx
import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_never,
    stop_after_attempt,
)

from applymagicsauce.auth import TokenManager
from applymagicsauce.config import MagicSauceConfig
from applymagicsauce.exceptions import (
    BadRequest,
    EndpointNotFound,
    ServiceUnavailable,
    TokenExpired,
    UnexpectedStatus,
    UsageLimitExceeded,
)
from applymagicsauce.models import PredictionResult, Token, parse_response
from applymagicsauce.options import OptionKey, PredictionOptions, like_ids_options
from applymagicsauce.transport import RawResponse, Transport

logger = structlog.get_logger(__name__)

TEXT_PATH = "/text"
LIKE_IDS_PATH = "/like_ids"


def _raise_for_prediction_status(response: RawResponse) -> None:
    status = response.status_code
    if status == 400:
        raise BadRequest(status, response.text)
    if status == 403:
        raise TokenExpired(status)
    if status == 404:
        raise EndpointNotFound(status)
    if status == 429:
        raise UsageLimitExceeded(status, response.text)
    if status == 500:
        raise ServiceUnavailable(status)
    if not 200 <= status < 300:
        raise UnexpectedStatus(status, response.text)


class MagicSauceClient:
    """
    Client for the Apply Magic Sauce API.

    The client keeps a current token, set by ``authenticate`` or passed to
    the constructor. When a prediction call finds the token expired and a
    default API key is configured, the token is renewed, replaces the
    current token, and the request is sent once more. A second rejection
    is raised as ``TokenExpired``.

    A client instance is not meant to be shared between threads while
    renewing tokens; the token reference itself is lock protected.
    """

    def __init__(
        self,
        config: Optional[MagicSauceConfig] = None,
        token: Optional[Token] = None,
        http_transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Configuration object (uses defaults and environment if not provided)
            token: Token to start with, e.g. one obtained earlier
            http_transport: Custom ``httpx.BaseTransport`` for the HTTP client
        """
        self.config = config or MagicSauceConfig()
        self._transport = Transport(self.config, http_transport=http_transport)
        self._tokens = TokenManager(self._transport, self.config)
        self._token = token
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[Token]:
        """The current token."""
        with self._lock:
            return self._token

    def replace_token(self, token: Optional[Token]) -> None:
        """Replace the current token."""
        with self._lock:
            self._token = token

    def authenticate(
        self,
        customer_id: Optional[int] = None,
        api_key: Optional[str] = None,
    ) -> Token:
        """
        Get a token and make it the current token.

        Args:
            customer_id: Customer identifier (defaults to ``config.customer_id``)
            api_key: API key (defaults to ``config.api_key``)

        Returns:
            The issued token
        """
        if customer_id is None:
            customer_id = self.config.customer_id
        if customer_id is None:
            raise ValueError("customer_id is required")

        token = self._tokens.authenticate(customer_id, api_key)
        self.replace_token(token)
        return token

    def renew_token(self, token: Optional[Token] = None) -> Token:
        """Renew a token (the current one by default) and make it current."""
        renewed = self._tokens.renew(self._resolve_token(token))
        self.replace_token(renewed)
        return renewed

    def predict_text(
        self,
        text: Union[str, bytes],
        options: PredictionOptions,
        token: Optional[Token] = None,
    ) -> PredictionResult:
        """
        Predict traits from a text.

        It is advisable to limit the predicted traits to improve
        performance. Use ``text_options`` to build ``options``; the
        ``source`` option is required.

        Args:
            text: Text to analyse, sent as the raw request body
            options: Query options, must contain ``source``
            token: Token to use instead of the current one

        Returns:
            The predictions; empty if the API had nothing to predict from

        Raises:
            BadRequest, EndpointNotFound, UsageLimitExceeded,
            ServiceUnavailable, UnexpectedStatus: On error statuses
            TokenExpired: If the token expired and could not be refreshed
            RenewalFailed: If renewing the expired token failed
            DeserializationError: If the response could not be parsed
            TransportError: If the request could not be sent
        """
        if OptionKey.SOURCE not in options:
            raise ValueError("options for text predictions must contain a source")

        content = text.encode("utf-8") if isinstance(text, str) else text
        return self._predict(TEXT_PATH, content, options, token)

    def predict_like_ids(
        self,
        ids: Iterable[Union[str, int]],
        options: Optional[PredictionOptions] = None,
        token: Optional[Token] = None,
    ) -> PredictionResult:
        """
        Predict traits from like IDs.

        Use ``like_ids_options`` to request interpretations or
        contributors. Raises the same errors as ``predict_text``.

        Args:
            ids: Like identifiers, sent as a JSON array of strings
            options: Query options (API defaults if not provided)
            token: Token to use instead of the current one
        """
        if isinstance(ids, (str, bytes)):
            raise TypeError("ids must be an iterable of like IDs, not a single string")

        payload = json.dumps([str(i) for i in ids])
        return self._predict(
            LIKE_IDS_PATH,
            payload.encode("utf-8"),
            options if options is not None else like_ids_options(),
            token,
        )

    def _resolve_token(self, token: Optional[Token]) -> Token:
        resolved = token if token is not None else self.token
        if resolved is None:
            raise ValueError("no token available, call authenticate() first")
        return resolved

    def _predict(
        self,
        path: str,
        content: bytes,
        options: PredictionOptions,
        token: Optional[Token],
    ) -> PredictionResult:
        current = self._resolve_token(token)

        if self._tokens.can_renew:
            retry_on = retry_if_exception_type(TokenExpired)
        else:
            retry_on = retry_never

        # At most one renewal; a second 403 is raised as TokenExpired
        retrying = Retrying(
            stop=stop_after_attempt(2),
            retry=retry_on,
            before_sleep=self._log_expired,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    current = self.renew_token(current)
                return self._send(path, content, options, current)

    def _send(
        self,
        path: str,
        content: bytes,
        options: PredictionOptions,
        token: Token,
    ) -> PredictionResult:
        response = self._transport.post(
            path, content=content, params=options.params, token=token
        )
        if response.status_code == 204:
            logger.debug("prediction_no_content", path=path)
            return PredictionResult()

        _raise_for_prediction_status(response)

        result = parse_response(PredictionResult, response.body)
        logger.debug("prediction_received", path=path, input_used=result.input_used)
        return result

    @staticmethod
    def _log_expired(retry_state: RetryCallState) -> None:
        logger.info("token_expired", attempt=retry_state.attempt_number)

    def close(self) -> None:
        """Close the client."""
        self._transport.close()

    def __enter__(self) -> "MagicSauceClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
