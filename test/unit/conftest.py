"""Test fixtures for robyn-webhook-receivers unit tests."""

from dataclasses import dataclass, field

import pytest
from asgi_correlation_id import correlation_id

from webhooks.core.registry import ReceiverRegistry
from webhooks.models.core import BodyType


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request. Keys are case-insensitive."""

    _data: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._data = {key.lower(): value for key, value in self._data.items()}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key.lower()] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: str | bytes = ""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path_params: dict = field(default_factory=dict)
    form_data: dict = field(default_factory=dict)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_correlation_id():
    """Isolate the correlation id context between tests."""
    token = correlation_id.set(None)
    yield
    correlation_id.reset(token)


@pytest.fixture
def make_request():
    """Factory fixture to create mock webhook requests."""

    def _make(
        content_type: str | None = None,
        *,
        receiver_name: str | None = None,
        webhook_id: str | None = None,
        body: str | bytes = "",
        method: str = "POST",
        form_data: dict | None = None,
        headers: dict | None = None,
    ) -> MockRequest:
        raw_headers = dict(headers or {})
        if content_type is not None:
            raw_headers["Content-Type"] = content_type
        path_params = {}
        if receiver_name is not None:
            path_params["receiver_name"] = receiver_name
        if webhook_id is not None:
            path_params["id"] = webhook_id
        return MockRequest(
            body=body,
            headers=MockHeaders(raw_headers),
            method=method,
            path_params=path_params,
            form_data=form_data or {},
        )

    return _make


@pytest.fixture
def registry() -> ReceiverRegistry:
    """Small registry covering single and multi-type receivers."""
    return ReceiverRegistry(
        {
            "github": BodyType.JSON,
            "slack": BodyType.FORM,
            "salesforce": BodyType.XML,
            "flexible": BodyType.JSON | BodyType.XML,
        }
    )
