import asyncio
import logging

import httpx
from pydantic import ValidationError

from ..models.analysis_schema import (
    AnalysisError,
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
)
from ..settings import Settings, settings as default_settings
from .errors import GeminiError, MalformedResponse
from .extractor import extract_json
from .gemini_client import GeminiClient, image_part, text_part
from .prompts import build_analysis_prompt

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "EATWISE co-pilot is busy. Retrying..."
TIMEOUT_MESSAGE = "EATWISE co-pilot took too long to respond."
NETWORK_MESSAGE = "Failed to contact EATWISE co-pilot."


def friendly_message(message: str) -> str:
    if "quota" in message.lower():
        return BUSY_MESSAGE
    return message


class FoodAnalyzerService:
    """Runs one image analysis and reports the outcome as a value, never raising."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or default_settings
        self.gemini = GeminiClient(self.settings, client)

    async def analyze(
        self,
        image_bytes: bytes,
        user_intent: str | None = None,
        mime_type: str = "image/jpeg",
    ) -> AnalysisOutcome:
        request = AnalysisRequest(
            image_bytes=image_bytes, user_intent=user_intent, mime_type=mime_type
        )
        return await self.analyze_request(request)

    async def analyze_request(self, request: AnalysisRequest) -> AnalysisOutcome:
        try:
            if self.settings.total_timeout_s is not None:
                return await asyncio.wait_for(self._run(request), self.settings.total_timeout_s)
            return await self._run(request)
        except asyncio.TimeoutError:
            logger.warning("Analysis exceeded %.1fs", self.settings.total_timeout_s)
            return AnalysisError(message=TIMEOUT_MESSAGE)
        except GeminiError as exc:
            logger.exception("Analysis failed: %s", exc)
            return AnalysisError(message=friendly_message(str(exc)))
        except httpx.HTTPError as exc:
            logger.exception("Gemini request failed: %s", exc)
            return AnalysisError(message=NETWORK_MESSAGE)

    async def _run(self, request: AnalysisRequest) -> AnalysisOutcome:
        prompt = build_analysis_prompt(request.user_intent)
        envelope = await self.gemini.generate(
            [text_part(prompt), image_part(request.image_bytes, request.mime_type)],
            json_mode=True,
        )

        parsed = extract_json(envelope)
        if not isinstance(parsed, dict):
            raise MalformedResponse(str(parsed), "AI returned an unexpected analysis format")

        try:
            result = AnalysisResult.model_validate(parsed)
        except ValidationError as exc:
            logger.exception("Schema mismatch: %s", parsed)
            raise MalformedResponse(str(parsed), "AI returned an unexpected analysis format") from exc

        logger.info(
            "Analysis complete: dish=%s risk=%s score=%s",
            result.dishName,
            result.riskLevel,
            result.healthScore,
        )
        return result
