import base64
import uuid
from typing import Literal, Optional, Tuple

from pydantic import BaseModel

from .models.analysis_schema import AnalysisOutcome
from .models.recipe_schema import Recipe

Tab = Literal["scan", "history", "chef"]


class ScanRecord(BaseModel):
    image: str
    outcome: AnalysisOutcome

    model_config = {"frozen": True}


class AppState(BaseModel):
    active_tab: Tab = "scan"
    pending_scan_id: Optional[str] = None
    scan: Optional[ScanRecord] = None
    recipe: Optional[Recipe] = None

    model_config = {"frozen": True}


def to_data_uri(image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def select_tab(state: AppState, tab: Tab) -> AppState:
    return state.model_copy(update={"active_tab": tab})


def start_scan(state: AppState) -> Tuple[AppState, str]:
    scan_id = uuid.uuid4().hex
    return state.model_copy(update={"pending_scan_id": scan_id}), scan_id


def complete_scan(
    state: AppState, scan_id: str, image: str, outcome: AnalysisOutcome
) -> AppState:
    """Store a finished scan. Results for abandoned scans are dropped."""
    if scan_id != state.pending_scan_id:
        return state
    return state.model_copy(
        update={
            "pending_scan_id": None,
            "scan": ScanRecord(image=image, outcome=outcome),
        }
    )


def reset_scan(state: AppState) -> AppState:
    return state.model_copy(update={"pending_scan_id": None, "scan": None})


def show_recipe(state: AppState, recipe: Recipe) -> AppState:
    return state.model_copy(update={"recipe": recipe})


def dismiss_recipe(state: AppState) -> AppState:
    return state.model_copy(update={"recipe": None})
