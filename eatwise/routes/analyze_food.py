import base64
import binascii

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..models.analysis_schema import AnalysisOutcome, AnalyzeBase64Request
from ..services.food_analyzer import FoodAnalyzerService

router = APIRouter(prefix="/ai", tags=["ai"])

DEFAULT_MIME_TYPE = "image/jpeg"


def get_food_analyzer() -> FoodAnalyzerService:
    return FoodAnalyzerService()


def decode_image(image_base64: str, mime_type: str | None) -> tuple[bytes, str]:
    data = image_base64.strip()

    # data:image/png;base64,....
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        if not mime_type:
            mime_type = header[len("data:"):].split(";")[0] or None

    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="image_base64 is not valid base64")

    if not image_bytes:
        raise HTTPException(status_code=400, detail="Empty image content")

    return image_bytes, mime_type or DEFAULT_MIME_TYPE


@router.post("/analyze_food_image", response_model=None)
async def analyze_food_image(
    image: UploadFile = File(...),
    user_intent: str | None = Form(default=None),
    service: FoodAnalyzerService = Depends(get_food_analyzer),
) -> AnalysisOutcome:
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Empty image content")

    mime_type = image.content_type or DEFAULT_MIME_TYPE
    if not mime_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Upload is not an image")

    return await service.analyze(image_bytes, user_intent, mime_type)


@router.post("/analyze_food_base64", response_model=None)
async def analyze_food_base64(
    payload: AnalyzeBase64Request,
    service: FoodAnalyzerService = Depends(get_food_analyzer),
) -> AnalysisOutcome:
    image_bytes, mime_type = decode_image(payload.image_base64, payload.mime_type)
    return await service.analyze(image_bytes, payload.user_intent, mime_type)
