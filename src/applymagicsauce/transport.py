"""
HTTP Transport
==============
Sends single POST requests to the Apply Magic Sauce API.
"""

import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx
import structlog

from applymagicsauce.config import MagicSauceConfig
from applymagicsauce.exceptions import TransportError
from applymagicsauce.models import Token

logger = structlog.get_logger(__name__)

AUTH_HEADER = "X-Auth-Token"


@dataclass(frozen=True)
class RawResponse:
    """Status code and fully read body of an API response."""

    status_code: int
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport:
    """
    Thin wrapper around ``httpx.Client``.

    Every call is a single POST with no retries. Timeouts and connection
    failures are raised as ``TransportError``; error statuses are returned
    to the caller untouched.
    """

    def __init__(
        self,
        config: MagicSauceConfig,
        http_transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the transport.

        Args:
            config: Client configuration (base URL, timeout, user agent)
            http_transport: Custom httpx transport, e.g. ``httpx.MockTransport``
        """
        self.config = config
        self._client = httpx.Client(
            base_url=config.api_url,
            timeout=config.timeout,
            headers=self._get_headers(),
            transport=http_transport,
        )

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers sent with every request."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }

    def post(
        self,
        path: str,
        content: bytes = b"",
        params: Optional[Mapping[str, Any]] = None,
        token: Optional[Token] = None,
    ) -> RawResponse:
        """
        POST ``content`` to ``path``.

        Args:
            path: Endpoint path relative to the API URL
            content: Request body
            params: Query parameters
            token: Token to send in the auth header

        The call fails once ``config.timeout`` seconds have passed since it
        started; a single stalled network step is cut off by the same limit.

        Returns:
            Status code and body of the response

        Raises:
            TransportError: If the request timed out or could not be sent
        """
        headers = {AUTH_HEADER: token.token} if token is not None else None
        deadline = time.monotonic() + self.config.timeout

        try:
            with self._client.stream(
                "POST",
                path,
                content=content,
                params=params,
                headers=headers,
            ) as response:
                chunks = []
                self._check_deadline(path, deadline)
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    self._check_deadline(path, deadline)
                body = b"".join(chunks)
        except httpx.TimeoutException as e:
            raise self._timed_out(path) from e
        except httpx.HTTPError as e:
            logger.warning("request_failed", path=path, error=str(e))
            raise TransportError(f"request to {path} failed: {e}") from e

        logger.debug("request_sent", path=path, status=response.status_code)
        return RawResponse(status_code=response.status_code, body=body)

    def _check_deadline(self, path: str, deadline: float) -> None:
        # httpx timeouts apply to each network step, not to the whole call
        if time.monotonic() > deadline:
            raise self._timed_out(path)

    def _timed_out(self, path: str) -> TransportError:
        logger.warning("request_timeout", path=path, timeout=self.config.timeout)
        return TransportError(f"request to {path} timed out after {self.config.timeout}s")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
