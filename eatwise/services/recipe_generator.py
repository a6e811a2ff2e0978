import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..models.recipe_schema import DEFAULT_RECIPE_TITLE, Recipe, placeholder_recipe
from ..settings import Settings, settings as default_settings
from .errors import GeminiError, MalformedResponse
from .extractor import extract_json
from .gemini_client import GeminiClient, text_part
from .prompts import build_recipe_prompt

logger = logging.getLogger(__name__)


class RecipeGeneratorService:
    """Best-effort recipe generation. Failures turn into a placeholder recipe."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or default_settings
        self.gemini = GeminiClient(self.settings, client)

    @staticmethod
    def _map_to_recipe(parsed: Any) -> Recipe:
        if not isinstance(parsed, dict):
            raise MalformedResponse(str(parsed), "AI returned an unexpected recipe format")

        title = parsed.get("title") or parsed.get("name") or DEFAULT_RECIPE_TITLE
        steps = parsed.get("steps")
        if not isinstance(steps, list):
            steps = []

        try:
            return Recipe(
                title=str(title),
                steps=[str(step) for step in steps if step is not None],
            )
        except ValidationError as exc:
            raise MalformedResponse(str(parsed), "AI returned an unexpected recipe format") from exc

    async def _run(self, dish_name: str) -> Recipe:
        envelope = await self.gemini.generate([text_part(build_recipe_prompt(dish_name))])
        return self._map_to_recipe(extract_json(envelope))

    async def generate_recipe(self, dish_name: str) -> Recipe:
        try:
            if self.settings.total_timeout_s is not None:
                recipe = await asyncio.wait_for(self._run(dish_name), self.settings.total_timeout_s)
            else:
                recipe = await self._run(dish_name)
        except asyncio.TimeoutError:
            logger.warning("Recipe for %r exceeded %.1fs", dish_name, self.settings.total_timeout_s)
            return placeholder_recipe()
        except (GeminiError, httpx.HTTPError) as exc:
            logger.exception("Recipe Error: %s", exc)
            return placeholder_recipe()

        logger.info("Recipe generated for %r: %s (%d steps)", dish_name, recipe.title, len(recipe.steps))
        return recipe
