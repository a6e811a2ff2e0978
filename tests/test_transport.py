"""Unit tests for the retrying HTTP transport."""

import httpx
import pytest
from pydantic import ValidationError

from eatwise.services.transport import RetryingTransport, RetryPolicy, is_retriable_status

URL = "https://gemini.test/v1beta/models/gemini-test:generateContent"


def _request() -> httpx.Request:
    return httpx.Request("POST", URL, json={"contents": []})


def _waits(mock_sleep) -> list[float]:
    return [call.args[0] for call in mock_sleep.await_args_list]


class TestRetryPolicy:
    def test_default_schedule_doubles_from_one_second(self) -> None:
        assert RetryPolicy().delays() == [1.0, 2.0, 4.0, 8.0, 16.0]

    def test_max_backoff_caps_each_wait(self) -> None:
        policy = RetryPolicy(max_retries=4, max_backoff_ms=3000)
        assert policy.delays() == [1.0, 2.0, 3.0, 3.0]

    def test_zero_retries_has_no_waits(self) -> None:
        assert RetryPolicy(max_retries=0).delays() == []

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_retries": -1}, {"initial_backoff_ms": 0}, {"backoff_multiplier": 1}],
    )
    def test_invalid_policy_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            RetryPolicy(**kwargs)


@pytest.mark.parametrize(
    "status,expected",
    [(429, True), (500, True), (503, True), (599, True), (200, False), (400, False), (404, False)],
)
def test_is_retriable_status(status: int, expected: bool) -> None:
    assert is_retriable_status(status) is expected


class TestRetryingTransport:
    @pytest.mark.asyncio
    async def test_success_first_try(self, mock_client, no_sleep) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"ok": True})

        async with mock_client(handler) as client:
            response = await RetryingTransport(client).send(_request())

        assert response.status_code == 200
        assert len(calls) == 1
        assert not no_sleep.called

    @pytest.mark.asyncio
    async def test_recovers_after_transient_statuses(self, mock_client, no_sleep) -> None:
        statuses = iter([429, 503, 200])
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(next(statuses), json={})

        async with mock_client(handler) as client:
            response = await RetryingTransport(client).send(_request())

        assert response.status_code == 200
        assert len(calls) == 3
        assert _waits(no_sleep) == [1.0, 2.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    async def test_gives_up_after_max_retries(self, mock_client, no_sleep, status: int) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status, json={"error": {"message": "unavailable"}})

        async with mock_client(handler) as client:
            transport = RetryingTransport(client, RetryPolicy(max_retries=3))
            response = await transport.send(_request())

        assert response.status_code == status
        assert len(calls) == 4
        waits = _waits(no_sleep)
        assert waits == [1.0, 2.0, 4.0]
        assert all(later > earlier for earlier, later in zip(waits, waits[1:]))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    async def test_non_retriable_status_returned_immediately(
        self, mock_client, no_sleep, status: int
    ) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status, json={})

        async with mock_client(handler) as client:
            response = await RetryingTransport(client).send(_request())

        assert response.status_code == status
        assert len(calls) == 1
        assert not no_sleep.called

    @pytest.mark.asyncio
    async def test_network_error_retried_then_succeeds(self, mock_client, no_sleep) -> None:
        attempts = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            attempts["count"] += 1
            if attempts["count"] < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={})

        async with mock_client(handler) as client:
            response = await RetryingTransport(client).send(_request())

        assert response.status_code == 200
        assert attempts["count"] == 3
        assert _waits(no_sleep) == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_network_error_raised_when_exhausted(self, mock_client, no_sleep) -> None:
        attempts = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            attempts["count"] += 1
            raise httpx.ReadTimeout("timed out", request=request)

        async with mock_client(handler) as client:
            transport = RetryingTransport(client, RetryPolicy(max_retries=2))
            with pytest.raises(httpx.ReadTimeout):
                await transport.send(_request())

        assert attempts["count"] == 3
        assert _waits(no_sleep) == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_zero_retries_sends_once(self, mock_client, no_sleep) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, json={})

        async with mock_client(handler) as client:
            transport = RetryingTransport(client, RetryPolicy(max_retries=0))
            response = await transport.send(_request())

        assert response.status_code == 503
        assert len(calls) == 1
        assert not no_sleep.called

    @pytest.mark.asyncio
    async def test_total_retry_budget_stops_early(self, mock_client, no_sleep) -> None:
        now = [0.0]

        def advance(seconds: float) -> None:
            now[0] += seconds

        no_sleep.side_effect = advance
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={})

        async with mock_client(handler) as client:
            transport = RetryingTransport(
                client,
                RetryPolicy(max_retries=5, max_total_ms=3500),
                clock=lambda: now[0],
            )
            response = await transport.send(_request())

        # 1s + 2s fit in the budget, the 4s wait would not
        assert response.status_code == 500
        assert len(calls) == 3
        assert _waits(no_sleep) == [1.0, 2.0]
