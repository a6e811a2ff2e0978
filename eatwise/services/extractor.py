import json
import logging
import re
from typing import Any

from .errors import EmptyResponse, MalformedResponse

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_text(envelope: Any) -> str:
    """Return the first candidate's text from a generateContent envelope."""
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise EmptyResponse()

    if not isinstance(text, str) or not text.strip():
        raise EmptyResponse()
    return text


def clean_json(text: str) -> str:
    # remove ```json and ``` wherever the model put them
    return _FENCE.sub("", text).strip()


def parse_json(raw_text: str) -> Any:
    clean = clean_json(raw_text)
    try:
        return json.loads(clean)
    except json.JSONDecodeError:
        logger.exception("Gemini returned invalid JSON\nRAW:\n%s\nCLEAN:\n%s", raw_text, clean)
        raise MalformedResponse(raw_text)


def extract_json(envelope: Any) -> Any:
    return parse_json(extract_text(envelope))
