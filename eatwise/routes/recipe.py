from fastapi import APIRouter, Depends

from ..models.recipe_schema import Recipe, RecipeRequest
from ..services.recipe_generator import RecipeGeneratorService

router = APIRouter(prefix="/ai", tags=["ai"])


def get_recipe_generator() -> RecipeGeneratorService:
    return RecipeGeneratorService()


@router.post("/recipe", response_model=Recipe)
async def recipe(
    payload: RecipeRequest,
    service: RecipeGeneratorService = Depends(get_recipe_generator),
) -> Recipe:
    return await service.generate_recipe(payload.dish_name)
