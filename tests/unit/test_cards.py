from foodmacros.core.models import Ingredient, Meal, NutrientSet
from foodmacros.core.reconcile import Reconciled, State, reconcile
from foodmacros.web.cards import (
    EMPTY_TEXT,
    LOADING_TITLE,
    normalize_variant,
    render_meal_card,
    render_meal_list,
    render_state,
)


def meal(n_ingredients=2, **kw):
    ingredients = [
        Ingredient(name=f"Item {i}", serving_info="1 serving",
                   nutrients=NutrientSet(calories=100.4, protein=5.6, carbs=10, fat=2))
        for i in range(n_ingredients)
    ]
    kw.setdefault("meal_name", "Combo")
    return Meal(ingredients=ingredients,
                total_nutrients=NutrientSet(calories=200.8, protein=11.2, carbs=20, fat=4), **kw)


def test_card_shows_name_size_and_rounded_totals():
    html = render_meal_card(meal(meal_size="Large"))
    assert "Combo" in html
    assert '<p class="meal-size">Large</p>' in html
    assert "Calories" in html and "Protein (g)" in html and "Carbs (g)" in html and "Fat (g)" in html
    assert '<p class="value">201</p>' in html
    assert '<p class="value">11</p>' in html


def test_breakdown_only_for_multi_ingredient_meals():
    assert "data-toggle-breakdown" in render_meal_card(meal(2))
    assert 'class="breakdown" hidden' in render_meal_card(meal(2))
    single = render_meal_card(meal(1))
    assert "data-toggle-breakdown" not in single
    assert "breakdown" not in single


def test_breakdown_lists_ingredients_with_serving_info():
    html = render_meal_card(meal(2))
    assert "Item 0 (1 serving)" in html
    assert "Item 1 (1 serving)" in html
    assert 'class="ingredient even"' in html and 'class="ingredient odd"' in html


def test_text_is_escaped():
    html = render_meal_card(meal(1, meal_name="<script>alert(1)</script>"))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_last_card_is_marked():
    html = render_meal_list([meal(meal_name="A"), meal(meal_name="B")], variant="web")
    assert html.count("meal-card web last") == 1
    assert ">B<" in html.split("meal-card web last")[1]


def test_render_state_variants():
    assert LOADING_TITLE in render_state(reconcile(None))
    assert EMPTY_TEXT in render_state(reconcile({}))
    error_html = render_state(Reconciled(State.ERROR, error="Food description is required"))
    assert "error-panel" in error_html
    assert "Food description is required" in error_html
    assert "meal-card" not in error_html


def test_unknown_variant_falls_back_to_web():
    assert normalize_variant("widget") == "widget"
    assert normalize_variant("fancy") == "web"
    assert normalize_variant(None) == "web"
