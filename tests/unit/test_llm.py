import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from foodmacros.config import Settings
from foodmacros.services.exceptions import (
    IncompleteResponseError,
    MalformedResponseError,
    MissingCredentialError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from foodmacros.services.llm import OpenAIFoodAnalyzer, build_prompt, parse_analysis

BLUEBERRIES = {
    "dailyTotals": {"calories": 999, "protein": 9, "carbs": 9, "fat": 9},
    "loggedMeals": [{
        "meal_name": "Blueberries",
        "meal_size": "100g",
        "total_nutrients": {"calories": 999, "protein": 9, "carbs": 9, "fat": 9},
        "ingredients": [{
            "name": "Blueberries", "brand": "Generic", "serving_info": "100g",
            "nutrients": {"calories": 57, "protein": 0.7, "carbs": 14.5, "fat": 0.3},
        }],
    }],
}

UPSTREAM_URL = "https://api.openai.com/v1/chat/completions"


class FakeCompletions:
    def __init__(self, content=None, exc=None):
        self.content = content
        self.exc = exc
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        msg = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=msg)])


class FakeClient:
    def __init__(self, **kw):
        self.completions = FakeCompletions(**kw)
        self.chat = SimpleNamespace(completions=self.completions)


def make_settings(**kw):
    kw.setdefault("openai_api_key", "test")
    return Settings(_env_file=None, **kw)


def test_prompt_carries_description_and_rules():
    prompt = build_prompt("pizza and burger")
    assert 'Food description: "pizza and burger"' in prompt
    assert "SEPARATE meals" in prompt
    assert '"loggedMeals"' in prompt


def test_parse_analysis_corrects_totals():
    result = parse_analysis(json.dumps(BLUEBERRIES))
    meal = result.logged_meals[0]
    assert (meal.total_nutrients.calories, meal.total_nutrients.protein,
            meal.total_nutrients.carbs, meal.total_nutrients.fat) == (57, 1, 14, 0)
    assert result.daily_totals == meal.total_nutrients


@pytest.mark.parametrize("content", [None, "", "not json", "```json\n{}\n```"])
def test_parse_analysis_rejects_malformed_json(content):
    with pytest.raises(MalformedResponseError):
        parse_analysis(content)


@pytest.mark.parametrize("content", [
    "[]",
    json.dumps({"loggedMeals": []}),
    json.dumps({"dailyTotals": {}}),
    json.dumps({"dailyTotals": {}, "loggedMeals": 5}),
    json.dumps({"dailyTotals": {}, "loggedMeals": [{"ingredients": []}]}),
    '{"dailyTotals": {}, "loggedMeals": [{"meal_name": "X", "ingredients": [{"name": "a", "nutrients": {"calories": NaN}}]}]}',
])
def test_parse_analysis_rejects_incomplete_payloads(content):
    with pytest.raises(IncompleteResponseError) as exc:
        parse_analysis(content)
    assert str(exc.value) == "Invalid response format from AI"


def test_analyze_sends_json_mode_request():
    client = FakeClient(content=json.dumps(BLUEBERRIES))
    analyzer = OpenAIFoodAnalyzer(make_settings(openai_model="gpt-4o-mini"), client=client)
    result = analyzer.analyze("100g blueberries")
    assert len(result.logged_meals) == 1
    call = client.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["response_format"] == {"type": "json_object"}
    assert call["temperature"] == 0.7
    assert call["messages"][0]["role"] == "system"
    assert "100g blueberries" in call["messages"][1]["content"]


def test_missing_key_is_reported_at_call_time():
    analyzer = OpenAIFoodAnalyzer(make_settings(openai_api_key=None))
    with pytest.raises(MissingCredentialError) as exc:
        analyzer.analyze("pizza")
    assert str(exc.value) == "OpenAI API key not configured"
    assert exc.value.status_code == 500


def test_upstream_status_error_keeps_status_and_message():
    response = httpx.Response(401, request=httpx.Request("POST", UPSTREAM_URL))
    err = openai.AuthenticationError(
        "Error code: 401", response=response, body={"message": "Incorrect API key provided"}
    )
    analyzer = OpenAIFoodAnalyzer(make_settings(), client=FakeClient(exc=err))
    with pytest.raises(UpstreamStatusError) as exc:
        analyzer.analyze("pizza")
    assert exc.value.status_code == 401
    assert str(exc.value) == "Incorrect API key provided"


def test_upstream_status_error_without_message_uses_fallback():
    response = httpx.Response(503, request=httpx.Request("POST", UPSTREAM_URL))
    err = openai.InternalServerError("", response=response, body=None)
    analyzer = OpenAIFoodAnalyzer(make_settings(), client=FakeClient(exc=err))
    with pytest.raises(UpstreamStatusError) as exc:
        analyzer.analyze("pizza")
    assert exc.value.status_code == 503
    assert str(exc.value) == "Failed to process food data"


def test_transport_failure():
    err = openai.APIConnectionError(request=httpx.Request("POST", UPSTREAM_URL))
    analyzer = OpenAIFoodAnalyzer(make_settings(), client=FakeClient(exc=err))
    with pytest.raises(UpstreamTransportError):
        analyzer.analyze("pizza")


def test_real_client_is_single_shot():
    analyzer = OpenAIFoodAnalyzer(make_settings(openai_timeout=12.5))
    assert analyzer._client.max_retries == 0
    assert analyzer._client.timeout == 12.5
