"""
Server-side rendering of meal cards.

Both the chat page (/web) and the embeddable widget (/nmacros) fetch card
markup from /api/cards, so this module is the single presentation layer for
meals. Each card owns its own expanded/collapsed state: the toggle button
flips the `hidden` attribute of the breakdown inside the same card element.
"""
from __future__ import annotations

from html import escape
from typing import List, Optional

from foodmacros.core.models import Ingredient, Meal, NutrientSet
from foodmacros.core.reconcile import Reconciled, State

LOADING_TITLE = "Analyzing food nutrition..."
LOADING_SUBTITLE = "Please wait"
EMPTY_TEXT = "No meal data available"

VARIANTS = ("web", "widget")

# (label, field) in display order
COLUMNS = (
    ("Calories", "calories"),
    ("Protein (g)", "protein"),
    ("Carbs (g)", "carbs"),
    ("Fat (g)", "fat"),
)

CHEVRON_SVG = (
    '<svg class="chevron" fill="none" stroke="currentColor" viewBox="0 0 24 24">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M19 9l-7 7-7-7"/>'
    "</svg>"
)

MEAL_ICON_SVG = (
    '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="1.5">'
    '<circle cx="12" cy="12" r="8"/><path d="M8 12h8M12 8v8"/></svg>'
)


def fmt_number(value) -> str:
    return str(round(value))


def _nutrient_row(ns: NutrientSet, with_labels: bool) -> str:
    cells = []
    for label, field in COLUMNS:
        head = f'<p class="label">{escape(label)}</p>' if with_labels else ""
        cells.append(
            f'<div class="cell">{head}<p class="value">{fmt_number(getattr(ns, field))}</p></div>'
        )
    return f'<div class="nutrients">{"".join(cells)}</div>'


def _ingredient_row(ingredient: Ingredient, index: int) -> str:
    title = escape(ingredient.name)
    if ingredient.serving_info:
        title += f" ({escape(ingredient.serving_info)})"
    stripe = "even" if index % 2 == 0 else "odd"
    return (
        f'<div class="ingredient {stripe}">'
        f'<span class="ingredient-name">{title}</span>'
        f"{_nutrient_row(ingredient.nutrients, with_labels=False)}"
        "</div>"
    )


def render_meal_card(meal: Meal, variant: str = "web", is_last: bool = False) -> str:
    """Markup for one meal: header, nutrient grid and a collapsed breakdown.

    The breakdown toggle only appears for meals with more than one ingredient.
    """
    expandable = len(meal.ingredients) > 1
    classes = ["meal-card", variant]
    if is_last:
        classes.append("last")

    size = f'<p class="meal-size">{escape(meal.meal_size)}</p>' if meal.meal_size else ""
    toggle = ""
    breakdown = ""
    if expandable:
        toggle = (
            '<button type="button" class="toggle" data-toggle-breakdown '
            f'aria-expanded="false" aria-label="Show breakdown">{CHEVRON_SVG}</button>'
        )
        rows = "".join(_ingredient_row(i, idx) for idx, i in enumerate(meal.ingredients))
        breakdown = f'<div class="breakdown" hidden>{rows}</div>'

    return (
        f'<div class="{" ".join(classes)}">'
        '<div class="meal-header">'
        f'<div class="meal-title"><div class="meal-icon">{MEAL_ICON_SVG}</div>'
        f'<div><h3 class="meal-name">{escape(meal.meal_name)}</h3>{size}</div></div>'
        f"<div>{toggle}</div>"
        "</div>"
        '<div class="divider"></div>'
        f'<div class="meal-body">{_nutrient_row(meal.total_nutrients, with_labels=True)}{breakdown}</div>'
        "</div>"
    )


def render_meal_list(meals: List[Meal], variant: str = "web") -> str:
    last = len(meals) - 1
    cards = "".join(render_meal_card(m, variant, is_last=(i == last)) for i, m in enumerate(meals))
    return f'<div class="meal-list">{cards}</div>'


def render_error(message: str) -> str:
    return f'<div class="error-panel"><p>{escape(message)}</p></div>'


def render_loading() -> str:
    return (
        '<div class="loading"><div class="spinner"></div>'
        f'<p class="loading-title">{LOADING_TITLE}</p>'
        f'<p class="loading-sub">{LOADING_SUBTITLE}</p></div>'
    )


def render_empty() -> str:
    return f'<div class="empty"><p>{EMPTY_TEXT}</p></div>'


def render_state(reconciled: Reconciled, variant: str = "web") -> str:
    """Markup for any reconciliation outcome. Errors never show partial cards."""
    if reconciled.state == State.ERROR:
        return render_error(reconciled.error or "")
    if reconciled.state == State.LOADING:
        return render_loading()
    if reconciled.state == State.READY and reconciled.result is not None:
        return render_meal_list(reconciled.result.logged_meals, variant)
    return render_empty()


def normalize_variant(variant: Optional[str]) -> str:
    return variant if variant in VARIANTS else "web"
