from typing import List

from pydantic import BaseModel, Field

DEFAULT_RECIPE_TITLE = "Healthy Recipe"


class RecipeRequest(BaseModel):
    dish_name: str = Field(..., min_length=1, description="Dish to build a recipe for")

    model_config = {"str_strip_whitespace": True}


class Recipe(BaseModel):
    title: str
    steps: List[str] = Field(default_factory=list)


def placeholder_recipe() -> Recipe:
    return Recipe(
        title="Recipe Unavailable",
        steps=["Sorry, we couldn't generate a recipe for this item right now."],
    )
