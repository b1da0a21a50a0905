# foodmacros/core/reconcile.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from .models import AnalysisResult, Meal
from .totals import correct_totals

logger = logging.getLogger(__name__)

INVALID_FORMAT = "Invalid response format from AI"


class State:
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


@dataclass(frozen=True)
class Reconciled:
    state: str
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


def extract_meal_data(payload: Any) -> Optional[dict]:
    """
    Locate the meal-data object inside a payload of unknown shape.

    Tried in order, first match wins:
    - payload["result"]["structuredContent"]
    - payload["structuredContent"]
    - payload["result"]
    - payload itself, when it carries loggedMeals or dailyTotals
    """
    if not isinstance(payload, dict):
        return None
    result = payload.get("result")
    if isinstance(result, dict) and isinstance(result.get("structuredContent"), dict):
        return result["structuredContent"]
    if isinstance(payload.get("structuredContent"), dict):
        return payload["structuredContent"]
    if isinstance(result, dict):
        return result
    if "loggedMeals" in payload or "dailyTotals" in payload:
        return payload
    return None


def _error_of(data: Optional[dict], payload: Any) -> Optional[str]:
    for source in (data, payload):
        if isinstance(source, dict) and source.get("error"):
            return str(source["error"])
    return None


def _is_generating(data: Optional[dict], payload: Any) -> bool:
    # The widget tool echoes foodDescription immediately; meals arrive once the host model is done.
    for source in (payload, data):
        if isinstance(source, dict) and "foodDescription" in source:
            meals = source.get("loggedMeals")
            if not (isinstance(meals, list) and meals):
                return True
    return False


def reconcile(payload: Any) -> Reconciled:
    """Classify `payload` as loading, error, empty or ready.

    Ready results are validated against the canonical schema and pass
    through the totals corrector before they are returned.
    """
    if payload is None:
        return Reconciled(State.LOADING)

    data = extract_meal_data(payload)
    error = _error_of(data, payload)
    if error:
        return Reconciled(State.ERROR, error=error)

    meals = data.get("loggedMeals") if data else None
    if meals is not None and not isinstance(meals, list):
        return Reconciled(State.ERROR, error=INVALID_FORMAT)
    if meals:
        try:
            parsed = [Meal.model_validate(m) for m in meals]
        except ValidationError as e:
            logger.warning("Discarding non-conforming meal data: %s", e)
            return Reconciled(State.ERROR, error=INVALID_FORMAT)
        return Reconciled(State.READY, result=correct_totals(parsed))

    if _is_generating(data, payload):
        return Reconciled(State.LOADING)
    return Reconciled(State.EMPTY)
