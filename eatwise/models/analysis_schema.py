import math
import re
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def _first_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    number = None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _NUMBER.search(value)
        if match:
            number = float(match.group())
    # inf and NaN are unknown
    if number is None or not math.isfinite(number):
        return None
    return number


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


class AnalysisRequest(BaseModel):
    image_bytes: bytes
    user_intent: Optional[str] = None
    mime_type: str = "image/jpeg"

    model_config = {"frozen": True}


class VisualTranslation(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class Macros(BaseModel):
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fats: Optional[str] = None

    @field_validator("protein", "carbs", "fats", mode="before")
    @classmethod
    def _with_unit(cls, value: Any) -> Optional[str]:
        # bare numbers are grams
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}g"
        return _as_text(value)


class AnalysisResult(BaseModel):
    """Loosely typed model output. Every field may be missing."""

    foodItems: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("foodItems", "food_items")
    )
    dishName: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("dishName", "dish_name")
    )
    freshness: Optional[str] = None
    riskLevel: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("riskLevel", "risk_level")
    )
    confidenceLevel: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("confidenceLevel", "confidence_level"),
    )
    explanation: Optional[str] = None
    visualTranslation: Optional[VisualTranslation] = Field(
        default=None,
        validation_alias=AliasChoices("visualTranslation", "visual_translation"),
    )
    healthRisks: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("healthRisks", "health_risks")
    )
    recommendations: Optional[List[str]] = None
    saferAlternatives: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("saferAlternatives", "safer_alternatives"),
    )
    calories: Optional[float] = None
    macros: Optional[Macros] = None
    healthScore: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("healthScore", "health_score")
    )

    model_config = {"extra": "allow"}

    @field_validator("dishName", "freshness", "riskLevel", "explanation", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("confidenceLevel", mode="before")
    @classmethod
    def _percentage(cls, value: Any) -> Optional[str]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}%"
        return _as_text(value)

    @field_validator(
        "foodItems", "healthRisks", "recommendations", "saferAlternatives", mode="before"
    )
    @classmethod
    def _text_list(cls, value: Any) -> Optional[List[str]]:
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(item) for item in value if item is not None and not isinstance(item, (dict, list))]
        return None

    @field_validator("visualTranslation", mode="before")
    @classmethod
    def _visual(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"description": value}
        return value if isinstance(value, dict) else None

    @field_validator("macros", mode="before")
    @classmethod
    def _macros(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator("calories", mode="before")
    @classmethod
    def _calories(cls, value: Any) -> Optional[float]:
        return _first_number(value)

    @field_validator("healthScore", mode="before")
    @classmethod
    def _score(cls, value: Any) -> Optional[int]:
        number = _first_number(value)
        if number is None:
            return None
        return max(0, min(10, round(number)))


class AnalysisError(BaseModel):
    message: str


AnalysisOutcome = Union[AnalysisResult, AnalysisError]


class AnalyzeBase64Request(BaseModel):
    image_base64: str = Field(..., description="Base64 image data or a data URI")
    user_intent: Optional[str] = Field(default=None, description="Free-text concern")
    mime_type: Optional[str] = Field(
        default=None, description="Image MIME type, taken from the data URI when omitted"
    )
