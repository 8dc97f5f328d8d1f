"""
Test Configuration
==================
Pytest fixtures for Apply Magic Sauce client tests.
"""

import json
from collections.abc import Callable, Generator
from typing import Any, Optional

import httpx
import pytest

from applymagicsauce import MagicSauceClient, MagicSauceConfig, Token
from applymagicsauce.transport import Transport

API_KEY = "test-api-key"
CUSTOMER_ID = 1234


class FakeAPI:
    """Replays queued responses and records the requests it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []

    def queue(
        self,
        status_code: int,
        json_body: Any = None,
        content: bytes = b"",
    ) -> None:
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
        self._responses.append((status_code, content))

    def queue_error(self, error: type[httpx.HTTPError]) -> None:
        self._responses.append(error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses.pop(0)
        if isinstance(item, type):
            raise item("simulated failure", request=request)
        status_code, content = item
        return httpx.Response(status_code, content=content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def make_config(api_key: Optional[str] = API_KEY, **kwargs: Any) -> MagicSauceConfig:
    return MagicSauceConfig(
        _env_file=None,
        api_key=api_key,
        customer_id=CUSTOMER_ID,
        **kwargs,
    )


@pytest.fixture
def fake_api() -> FakeAPI:
    """Fake API with an empty response queue."""
    return FakeAPI()


@pytest.fixture
def config() -> MagicSauceConfig:
    """Config with a default API key."""
    return make_config()


@pytest.fixture
def transport(fake_api: FakeAPI, config: MagicSauceConfig) -> Generator[Transport, None, None]:
    """Transport wired to the fake API."""
    with Transport(config, http_transport=fake_api.transport) as t:
        yield t


@pytest.fixture
def make_client(
    fake_api: FakeAPI,
) -> Generator[Callable[..., MagicSauceClient], None, None]:
    """Factory for clients wired to the fake API."""
    clients: list[MagicSauceClient] = []

    def factory(
        api_key: Optional[str] = API_KEY,
        token: Optional[Token] = None,
    ) -> MagicSauceClient:
        client = MagicSauceClient(
            make_config(api_key=api_key),
            token=token,
            http_transport=fake_api.transport,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def token_payload() -> dict:
    """Sample response of the /auth endpoint."""
    return {
        "token": "a1b2c3d4-old",
        "customer_id": CUSTOMER_ID,
        "expires": 1467204521,
        "permissions": ["like_ids", "text"],
        "usage_limits": [
            {
                "method": "like_ids",
                "callsLimit": 1000,
                "callsAvailable": 998,
                "callsAvailableSince": 1467200921000,
                "callsRenewal": True,
                "callsRenewalDays": 30,
            },
            {
                "method": "text",
                "callsLimit": 100,
                "callsAvailable": 100,
                "callsAvailableSince": 1467200921000,
                "callsRenewal": False,
                "callsRenewalDays": 0,
            },
        ],
    }


@pytest.fixture
def renewed_payload(token_payload: dict) -> dict:
    """Sample /auth response for a renewed token."""
    return {
        "token": "e5f6a7b8-new",
        "customer_id": CUSTOMER_ID,
        "expires": 1467208121,
        "permissions": ["text"],
        "usage_limits": [token_payload["usage_limits"][1]],
    }


@pytest.fixture
def token(token_payload: dict) -> Token:
    """Token parsed from the sample payload."""
    return Token.model_validate(token_payload)


@pytest.fixture
def prediction_payload() -> dict:
    """Sample response of a prediction endpoint."""
    return {
        "input_used": 42,
        "predictions": [
            {"trait": "BIG5_Openness", "value": 0.81},
            {"trait": "BIG5_Extraversion", "value": 0.33},
            {"trait": "Age", "value": 27.5},
        ],
        "interpretations": [
            {"trait": "Political", "value": [{"party": "Liberal", "probability": 0.7}]},
            {"trait": "Religion", "value": "None"},
        ],
        "contributors": [
            {
                "trait": "BIG5_Openness",
                "positive": ["1234", "5678"],
                "negative": ["9012"],
            }
        ],
    }
