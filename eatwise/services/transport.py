import asyncio
import logging
import time

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

RETRIABLE_STATUS = 429


class RetryPolicy(BaseModel):
    max_retries: int = Field(default=5, ge=0)
    initial_backoff_ms: int = Field(default=1000, gt=0)
    backoff_multiplier: float = Field(default=2.0, gt=1)
    # None keeps the uncapped doubling
    max_backoff_ms: int | None = Field(default=None, gt=0)
    max_total_ms: int | None = Field(default=None, gt=0)

    model_config = {"frozen": True}

    def delays(self) -> list[float]:
        """Backoff schedule in seconds, one entry per allowed retry."""
        delays: list[float] = []
        backoff = float(self.initial_backoff_ms)
        for _ in range(self.max_retries):
            wait = backoff
            if self.max_backoff_ms is not None:
                wait = min(wait, float(self.max_backoff_ms))
            delays.append(wait / 1000)
            backoff *= self.backoff_multiplier
        return delays


def is_retriable_status(status_code: int) -> bool:
    return status_code == RETRIABLE_STATUS or status_code >= 500


class RetryingTransport:
    """Sends one request, retrying network failures, 429 and 5xx responses.

    Non-retriable responses are returned as-is. When retries run out the last
    response is returned, or the last network error is raised.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        policy: RetryPolicy | None = None,
        clock=time.monotonic,
    ):
        self.client = client
        self.policy = policy or RetryPolicy()
        self._clock = clock

    def _within_budget(self, started: float, wait: float) -> bool:
        if self.policy.max_total_ms is None:
            return True
        elapsed = self._clock() - started
        return (elapsed + wait) * 1000 <= self.policy.max_total_ms

    async def send(self, request: httpx.Request) -> httpx.Response:
        delays = self.policy.delays()
        started = self._clock()
        attempt = 0

        while True:
            wait = delays[attempt] if attempt < len(delays) else None

            try:
                response = await self.client.send(request)
            except httpx.TransportError as exc:
                if wait is None or not self._within_budget(started, wait):
                    logger.error(
                        "Request to %s failed after %d attempt(s): %s",
                        request.url.host,
                        attempt + 1,
                        exc,
                    )
                    raise
                logger.warning(
                    "Network error (%s), retrying in %.2fs (attempt %d/%d)",
                    exc.__class__.__name__,
                    wait,
                    attempt + 1,
                    self.policy.max_retries,
                )
            else:
                if not is_retriable_status(response.status_code):
                    return response
                if wait is None or not self._within_budget(started, wait):
                    logger.error(
                        "Giving up on HTTP %d after %d attempt(s)",
                        response.status_code,
                        attempt + 1,
                    )
                    return response
                logger.warning(
                    "Got HTTP %d, retrying in %.2fs (attempt %d/%d)",
                    response.status_code,
                    wait,
                    attempt + 1,
                    self.policy.max_retries,
                )
                await response.aclose()

            await asyncio.sleep(wait)
            attempt += 1
