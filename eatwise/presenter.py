"""Display values for scan results and recipes.

The model output is never fully trusted, so every value shown to the user
comes with an explicit default here.
"""

import re
from typing import List, Optional

from pydantic import BaseModel

from .models.analysis_schema import AnalysisError, AnalysisOutcome
from .models.recipe_schema import DEFAULT_RECIPE_TITLE, Recipe

DEFAULT_DISH_NAME = "Food Items"
DEFAULT_HEALTH_SCORE = 5
DEFAULT_MACRO = "-"
ERROR_TITLE = "Technical Pause"
UNKNOWN_ERROR = "Unknown Error Occurred"
NO_STEPS_MESSAGE = "Unable to generate steps for this dish."

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


class AnalysisView(BaseModel):
    is_error: bool = False
    error_title: Optional[str] = None
    error_message: Optional[str] = None

    dish_name: str = DEFAULT_DISH_NAME
    food_items: List[str] = []
    freshness: Optional[str] = None
    risk_level: Optional[str] = None
    explanation: Optional[str] = None
    visual_title: Optional[str] = None
    visual_description: Optional[str] = None
    health_risks: List[str] = []
    recommendations: List[str] = []
    safer_alternatives: List[str] = []
    calories: Optional[float] = None
    protein: str = DEFAULT_MACRO
    carbs: str = DEFAULT_MACRO
    fats: str = DEFAULT_MACRO

    confidence_value: int = 0
    needle_rotation: float = -90.0
    gauge_color: str = "#ef4444"
    health_score: int = DEFAULT_HEALTH_SCORE
    score_color: str = "bg-amber-500"


class RecipeView(BaseModel):
    title: str
    steps: List[str]
    empty_message: Optional[str] = None


def confidence_value(confidence_level: Optional[str]) -> int:
    """Leading integer of e.g. "85%", clamped to 0-100; 0 when unreadable."""
    if not confidence_level:
        return 0
    match = _LEADING_INT.match(confidence_level)
    if not match:
        return 0
    return max(0, min(100, int(match.group(1))))


def gauge_color(value: int) -> str:
    if value > 80:
        return "#10b981"
    if value > 50:
        return "#f59e0b"
    return "#ef4444"


def score_color(score: int) -> str:
    if score > 7:
        return "bg-emerald-500"
    if score > 4:
        return "bg-amber-500"
    return "bg-rose-500"


def present_analysis(outcome: Optional[AnalysisOutcome]) -> AnalysisView:
    if outcome is None or isinstance(outcome, AnalysisError):
        message = outcome.message if outcome is not None else None
        return AnalysisView(
            is_error=True,
            error_title=ERROR_TITLE,
            error_message=message or UNKNOWN_ERROR,
        )

    confidence = confidence_value(outcome.confidenceLevel)
    score = outcome.healthScore if outcome.healthScore is not None else DEFAULT_HEALTH_SCORE
    macros = outcome.macros
    visual = outcome.visualTranslation

    return AnalysisView(
        dish_name=outcome.dishName or DEFAULT_DISH_NAME,
        food_items=outcome.foodItems or [],
        freshness=outcome.freshness,
        risk_level=outcome.riskLevel,
        explanation=outcome.explanation,
        visual_title=visual.title if visual else None,
        visual_description=visual.description if visual else None,
        health_risks=outcome.healthRisks or [],
        recommendations=outcome.recommendations or [],
        safer_alternatives=outcome.saferAlternatives or [],
        calories=outcome.calories,
        protein=(macros.protein if macros else None) or DEFAULT_MACRO,
        carbs=(macros.carbs if macros else None) or DEFAULT_MACRO,
        fats=(macros.fats if macros else None) or DEFAULT_MACRO,
        confidence_value=confidence,
        needle_rotation=confidence / 100 * 180 - 90,
        gauge_color=gauge_color(confidence),
        health_score=score,
        score_color=score_color(score),
    )


def present_recipe(recipe: Recipe) -> RecipeView:
    return RecipeView(
        title=recipe.title or DEFAULT_RECIPE_TITLE,
        steps=recipe.steps,
        empty_message=None if recipe.steps else NO_STEPS_MESSAGE,
    )
