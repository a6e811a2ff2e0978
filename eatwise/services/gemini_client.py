import base64
import logging
from typing import Any

import httpx

from ..settings import Settings
from .errors import MalformedResponse, ProviderError
from .transport import RetryingTransport

logger = logging.getLogger(__name__)


def text_part(text: str) -> dict:
    return {"text": text}


def image_part(image_bytes: bytes, mime_type: str) -> dict:
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(image_bytes).decode("ascii"),
        }
    }


class GeminiClient:
    """Calls generateContent over REST through a RetryingTransport."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client

    @property
    def endpoint(self) -> str:
        base = self.settings.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.settings.gemini_model}:generateContent"

    def build_body(self, parts: list[dict], json_mode: bool) -> dict:
        body: dict[str, Any] = {"contents": [{"parts": parts}]}
        if json_mode:
            body["generationConfig"] = {"responseMimeType": "application/json"}
        return body

    async def generate(self, parts: list[dict], json_mode: bool = False) -> dict:
        """POST the parts and return the decoded response envelope.

        Raises ProviderError for HTTP errors and error envelopes,
        MalformedResponse when the body is not JSON, and httpx.TransportError
        once the transport has given up on network failures.
        """
        if not self.settings.gemini_api_key:
            raise ProviderError("GEMINI_API_KEY is not configured")

        if self._client is not None:
            response = await self._send(self._client, parts, json_mode)
        else:
            async with httpx.AsyncClient(timeout=self.settings.request_timeout_s) as client:
                response = await self._send(client, parts, json_mode)

        return self._decode(response)

    async def _send(
        self, client: httpx.AsyncClient, parts: list[dict], json_mode: bool
    ) -> httpx.Response:
        request = client.build_request(
            "POST",
            self.endpoint,
            params={"key": self.settings.gemini_api_key},
            headers={"Content-Type": "application/json"},
            json=self.build_body(parts, json_mode),
        )
        transport = RetryingTransport(client, self.settings.retry_policy())
        return await transport.send(request)

    @staticmethod
    def _decode(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            if response.is_error:
                raise ProviderError(
                    f"Gemini API error: {response.status_code}", response.status_code
                )
            raise MalformedResponse(response.text, "Invalid API response")

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderError(
                message or f"Gemini API error: {response.status_code}",
                response.status_code,
            )

        if response.is_error:
            raise ProviderError(f"Gemini API error: {response.status_code}", response.status_code)

        if not isinstance(data, dict):
            raise MalformedResponse(response.text, "Invalid API response")
        return data
