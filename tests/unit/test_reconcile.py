import pytest
from foodmacros.core.reconcile import INVALID_FORMAT, State, extract_meal_data, reconcile

MEALS = {
    "dailyTotals": {"calories": 0, "protein": 0, "carbs": 0, "fat": 0},
    "loggedMeals": [
        {
            "meal_name": "Pizza and wings",
            "total_nutrients": {"calories": 1, "protein": 1, "carbs": 1, "fat": 1},
            "ingredients": [
                {"name": "Pizza", "serving_info": "1 slice",
                 "nutrients": {"calories": 285, "protein": 12, "carbs": 36, "fat": 10}},
                {"name": "Wings", "serving_info": "6 pieces",
                 "nutrients": {"calories": 430.6, "protein": 38.2, "carbs": 0.4, "fat": 29.5}},
            ],
        }
    ],
}


def test_extracts_nested_structured_content_first():
    x = {"loggedMeals": []}
    payload = {"result": {"structuredContent": x}, "structuredContent": {"other": 1}}
    assert extract_meal_data(payload) is x


def test_extracts_top_level_structured_content():
    x = {"loggedMeals": []}
    assert extract_meal_data({"structuredContent": x}) is x


def test_extracts_result_object():
    x = {"dailyTotals": {}}
    assert extract_meal_data({"result": x}) is x


def test_extracts_raw_payload_with_meal_keys():
    assert extract_meal_data(MEALS) is MEALS
    assert extract_meal_data({"something": "else"}) is None


@pytest.mark.parametrize("payload", [None, [], "text", 3])
def test_extract_ignores_non_objects(payload):
    assert extract_meal_data(payload) is None


def test_null_payload_is_loading():
    out = reconcile(None)
    assert out.state == State.LOADING
    assert out.error is None


def test_description_without_meals_is_loading():
    out = reconcile({"foodDescription": "pizza", "dailyTotals": None, "loggedMeals": None})
    assert out.state == State.LOADING


def test_description_inside_structured_content_is_loading():
    out = reconcile({"structuredContent": {"foodDescription": "pizza", "loggedMeals": []}})
    assert out.state == State.LOADING


def test_error_field_wins():
    assert reconcile({"structuredContent": {"error": "boom"}}).error == "boom"
    out = reconcile({"error": "Failed to analyze food"})
    assert out.state == State.ERROR
    assert out.error == "Failed to analyze food"


def test_ready_result_is_corrected():
    out = reconcile({"result": {"structuredContent": MEALS}})
    assert out.state == State.READY
    meal = out.result.logged_meals[0]
    assert meal.total_nutrients.calories == 716
    assert meal.total_nutrients.protein == 50
    assert out.result.daily_totals.calories == 716


def test_non_conforming_meals_are_rejected():
    out = reconcile({"loggedMeals": [{"ingredients": []}]})
    assert out.state == State.ERROR
    assert out.error == INVALID_FORMAT


def test_meals_must_be_a_list():
    out = reconcile({"loggedMeals": {"meal_name": "Pizza"}})
    assert out.state == State.ERROR


def test_nothing_recognizable_is_empty():
    assert reconcile({}).state == State.EMPTY
    assert reconcile({"loggedMeals": []}).state == State.EMPTY


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_macros_are_rejected(value):
    meals = [{"meal_name": "X", "ingredients": [{"name": "a", "nutrients": {"calories": value}}]}]
    out = reconcile({"loggedMeals": meals})
    assert out.state == State.ERROR
    assert out.error == INVALID_FORMAT


def test_blank_meal_name_is_rejected():
    out = reconcile({"loggedMeals": [{"meal_name": "   ", "ingredients": []}]})
    assert out.state == State.ERROR
    assert out.error == INVALID_FORMAT
