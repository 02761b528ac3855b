# agents/response_parser.py
import json
import logging
from typing import Any

from pydantic import ValidationError

from errors import ResponseFormatError
from models import AIReviewEntry, ReviewFailure, ReviewResult, ReviewSuccess

logger = logging.getLogger(__name__)

RESPONSE_KEY = "reviews"


def _extract_json_from_text(text: str) -> Any:
    """
    Try multiple ways to extract the JSON object from model text:
    1. Direct json.loads(text)
    2. Strip a ```json fence and parse the inside
    3. Find first '{' and last '}' and parse that substring
    """
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    if text.startswith("```"):
        inner = text.split("\n", 1)[-1].rsplit("```", 1)[0].strip()
        try:
            return json.loads(inner)
        except json.JSONDecodeError:
            pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            pass

    raise ResponseFormatError("No JSON object found in model response")


def _load_entries(raw: str):
    if not raw or not raw.strip():
        raise ResponseFormatError("Empty model response")

    parsed = _extract_json_from_text(raw)
    if not isinstance(parsed, dict) or not isinstance(parsed.get(RESPONSE_KEY), list):
        raise ResponseFormatError(f'Expected an object with a "{RESPONSE_KEY}" list')

    entries = []
    for item in parsed[RESPONSE_KEY]:
        try:
            entries.append(AIReviewEntry.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed review entry: %r", item)
    return entries


def parse_review_response(raw: str) -> ReviewResult:
    try:
        return ReviewSuccess(entries=_load_entries(raw))
    except ResponseFormatError as e:
        return ReviewFailure(reason=str(e))
