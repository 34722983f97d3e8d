"""Parse and sanitize food lists returned by the vision model."""

import json
import math
import re

from nutrisnap.domain.analysis import MACRO_FIELDS, FoodItem
from nutrisnap.domain.errors import MalformedResponseError, MissingFoodsFieldError

_JSON_FENCE_OPEN = re.compile(r"^```json\s*")
_FENCE_OPEN = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"```\s*$")


def normalize_foods(text: str) -> list[FoodItem]:
    """Turn raw completion text into validated, rounded food items."""
    cleaned = strip_code_fence(text)
    try:
        parsed = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedResponseError(
            f"Failed to parse JSON response from vision API: {exc}"
        ) from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("foods"), list):
        raise MissingFoodsFieldError

    return [_to_food_item(entry) for entry in parsed["foods"] if _is_valid_entry(entry)]


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapping the whole text, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", cleaned, count=1))
    elif cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned, count=1))
    return cleaned


def round_macro(value: float) -> float:
    """Clamp to zero and round half up to one decimal place."""
    return max(0.0, math.floor(value * 10 + 0.5) / 10)


def _is_valid_entry(entry: object) -> bool:
    if not isinstance(entry, dict):
        return False
    if not isinstance(entry.get("name"), str):
        return False
    if not isinstance(entry.get("quantity"), str):
        return False
    return all(_is_number(entry.get(field)) for field in MACRO_FIELDS)


def _is_number(value: object) -> bool:
    if not isinstance(value, int | float) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value) * 10)
    except OverflowError:
        return False


def _to_food_item(entry: dict[str, object]) -> FoodItem:
    macros = {field: round_macro(float(entry[field])) for field in MACRO_FIELDS}
    return FoodItem(name=entry["name"], quantity=entry["quantity"], **macros)


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-finite number {name!r} is not valid JSON")
