# foodmacros/core/totals.py
from __future__ import annotations

from typing import Iterable, List

from .models import AnalysisResult, Meal, NutrientSet

FIELDS = ("calories", "protein", "carbs", "fat")


def sum_nutrients(sets: Iterable[NutrientSet]) -> NutrientSet:
    """
    Element-wise sum of `sets`, each field rounded with the builtin round().

    Sums first and rounds once at the end so per-item rounding error does not
    accumulate. An empty iterable yields all zeros.
    """
    acc = dict.fromkeys(FIELDS, 0)
    for ns in sets:
        for f in FIELDS:
            acc[f] += getattr(ns, f)
    return NutrientSet(**{f: round(v) for f, v in acc.items()})


def correct_meal(meal: Meal) -> Meal:
    """Return a copy of `meal` whose total is derived from its ingredients.

    A meal with no ingredients keeps whatever total it was reported with.
    """
    if not meal.ingredients:
        return meal
    total = sum_nutrients(i.nutrients for i in meal.ingredients)
    return meal.model_copy(update={"total_nutrients": total})


def correct_totals(meals: Iterable[Meal]) -> AnalysisResult:
    """
    Recompute every meal total from its ingredients, then the daily totals
    from the corrected meals.

    The upstream model is asked to self-sum but is not trusted to. The
    function is pure and idempotent: feeding its output back in changes
    nothing.
    """
    corrected: List[Meal] = [correct_meal(m) for m in meals]
    daily = sum_nutrients(m.total_nutrients for m in corrected)
    return AnalysisResult(daily_totals=daily, logged_meals=corrected)
