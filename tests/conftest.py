"""
Shared fixtures for EATWISE tests.

Gemini is never contacted: provider responses come from httpx.MockTransport
and retry backoff is patched out so tests run instantly.
"""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from eatwise.settings import Settings


def gemini_envelope(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def test_settings() -> Settings:
    """Settings with an API key and a short retry schedule."""
    return Settings(
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL="gemini-test",
        GEMINI_BASE_URL="https://gemini.test/v1beta",
        GEMINI_MAX_RETRIES=2,
        GEMINI_INITIAL_BACKOFF_MS=100,
    )


@pytest.fixture
def no_sleep():
    """Replace asyncio.sleep so backoff waits are recorded, not slept."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def envelope() -> Callable[[str], dict]:
    return gemini_envelope


@pytest.fixture
def mock_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient answering every request with the handler."""

    def _build(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build


@pytest.fixture
def request_body() -> Callable[[httpx.Request], dict]:
    def _body(request: httpx.Request) -> dict:
        return json.loads(request.content)

    return _body
