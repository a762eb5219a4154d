# recipe_genie/services/normalize.py
"""
Turns the free-form text returned by the model into recipe records.

Parsing and the default policy are kept apart: ``extract_recipes_json`` only
finds and decodes the JSON array, ``normalize_recipe`` applies
``RECIPE_DEFAULTS`` to one decoded element.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from recipe_genie.app.domain.errors import ResponseParseError
from recipe_genie.app.domain.models import (
    DIETARY_FLAGS,
    NUTRIENT_FIELDS,
    Difficulty,
    GenerationOptions,
)
from recipe_genie.services.prompt import DEFAULT_SERVINGS

log = logging.getLogger("normalize")

# Greedy on purpose: from the first "[" to the last "]"
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

RECIPE_DEFAULTS: Dict[str, Any] = {
    "servings": DEFAULT_SERVINGS,
    "cuisine": "Mixed",
    "difficulty": Difficulty.MEDIUM.value,
    "nutrient": 0,
    "dietary_flag": False,
}

# Keys copied as-is when present; required ones are checked at persistence time
_PASSTHROUGH_FIELDS = ("title", "description", "ingredients", "instructions", "prepTime", "cookTime")


def extract_recipes_json(text: str) -> List[Any]:
    """
    Decode the JSON array embedded in the model output.

    Raises:
        ResponseParseError: when neither the array substring nor the whole
            text decodes to a JSON list
    """
    match = _JSON_ARRAY_RE.search(text or "")
    try:
        if match:
            parsed = json.loads(match.group(0))
        else:
            parsed = json.loads(text)
    except (TypeError, ValueError) as exc:
        log.error("normalize.parse_fail error=%s raw=%r", exc, text)
        raise ResponseParseError(raw_text=text) from exc

    if not isinstance(parsed, list):
        log.error("normalize.not_a_list type=%s raw=%r", type(parsed).__name__, text)
        raise ResponseParseError(raw_text=text)
    return parsed


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _first_present(*candidates: Any) -> Optional[Any]:
    for value in candidates:
        if _present(value):
            return value
    return None


def _to_int(value: Any) -> Optional[int]:
    # bools are ints in Python but never a duration
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _minutes(value: Any) -> Any:
    """Numeric strings become ints; anything else is left for validation."""
    as_int = _to_int(value)
    return value if as_int is None else as_int


def _total_time(raw: Dict[str, Any]) -> Optional[Any]:
    if _present(raw.get("totalTime")):
        return _minutes(raw["totalTime"])
    prep, cook = _to_int(raw.get("prepTime")), _to_int(raw.get("cookTime"))
    if prep is None or cook is None:
        # left unset so persistence validation names the missing field
        return None
    return prep + cook


def _difficulty(value: Any) -> str:
    if isinstance(value, str) and value in Difficulty.values():
        return value
    return RECIPE_DEFAULTS["difficulty"]


def _nutritional_info(raw: Dict[str, Any]) -> Dict[str, Any]:
    nested = raw.get("nutritionalInfo") if isinstance(raw.get("nutritionalInfo"), dict) else {}
    return {
        name: _first_present(nested.get(name), raw.get(name), RECIPE_DEFAULTS["nutrient"])
        for name in NUTRIENT_FIELDS
    }


def _dietary_info(raw: Dict[str, Any]) -> Dict[str, bool]:
    nested = raw.get("dietaryInfo") if isinstance(raw.get("dietaryInfo"), dict) else {}
    out: Dict[str, bool] = {}
    for flag in DIETARY_FLAGS:
        value = nested.get(flag)
        out[flag] = value if isinstance(value, bool) else RECIPE_DEFAULTS["dietary_flag"]
    return out


def normalize_recipe(raw: Any, options: GenerationOptions) -> Dict[str, Any]:
    """Apply the default table to one element of the model's array."""
    data = raw if isinstance(raw, dict) else {}

    recipe: Dict[str, Any] = {key: data.get(key) for key in _PASSTHROUGH_FIELDS}
    recipe["prepTime"] = _minutes(data.get("prepTime"))
    recipe["cookTime"] = _minutes(data.get("cookTime"))
    recipe["totalTime"] = _total_time(data)
    recipe["servings"] = _first_present(data.get("servings"), options.servings, RECIPE_DEFAULTS["servings"])
    recipe["cuisine"] = _first_present(data.get("cuisine"), options.cuisine, RECIPE_DEFAULTS["cuisine"])
    recipe["difficulty"] = _difficulty(data.get("difficulty"))
    recipe["nutritionalInfo"] = _nutritional_info(data)
    recipe["dietaryInfo"] = _dietary_info(data)
    if options.creator_id:
        recipe["creator"] = options.creator_id
    return recipe


def normalize_recipes(raw_items: List[Any], options: GenerationOptions) -> List[Dict[str, Any]]:
    return [normalize_recipe(item, options) for item in raw_items]
