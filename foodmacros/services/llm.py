from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from pydantic import BaseModel, ValidationError
from .exceptions import (
    IncompleteResponseError,
    LLMError,
    MalformedResponseError,
    MissingCredentialError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from foodmacros.core.models import AnalysisResult, Meal
from foodmacros.core.totals import correct_totals
from foodmacros.config import Settings

# OpenAI SDK v1+
try:
    import openai
    from openai import OpenAI
except Exception as e:  # pragma: no cover
    raise LLMError("Failed to import OpenAI SDK. Install with `pip install openai`") from e

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a nutrition expert that returns ONLY valid JSON responses "
    "with no additional text or formatting."
)

RESPONSE_SHAPE = """{
  "dailyTotals": {
    "calories": <sum of all meals>,
    "protein": <sum of all meals in grams>,
    "carbs": <sum of all meals in grams>,
    "fat": <sum of all meals in grams>
  },
  "loggedMeals": [
    {
      "meal_name": "Meal Name",
      "meal_size": "Small/Medium/Large or specific size like '100g' or '6 pieces'",
      "total_nutrients": {
        "calories": <actual number>,
        "protein": <actual number in grams>,
        "carbs": <actual number in grams>,
        "fat": <actual number in grams>
      },
      "ingredients": [
        {
          "name": "Ingredient Name",
          "brand": "Brand Name or Generic",
          "serving_info": "1 serving (Xg) or specific portion",
          "nutrients": {
            "calories": <actual number>,
            "protein": <actual number in grams>,
            "carbs": <actual number in grams>,
            "fat": <actual number in grams>
          }
        }
      ]
    }
  ]
}"""

GROUPING_RULES = (
    "IMPORTANT RULES:\n"
    "1. MEAL vs INGREDIENTS logic:\n"
    "   - If items are part of a COMBO/DEAL/MEAL (like \"Big Mac Meal\", \"Combo\", \"Deal\", "
    "or items mentioned WITH each other using \"with\"): Create ONE meal with ALL items as ingredients\n"
    "   - If items are SEPARATE/INDEPENDENT foods mentioned with \"and\", \"vs\", \"versus\", "
    "or comparison words: Create SEPARATE meals for each (for comparison)\n\n"
    "2. Examples of ONE MEAL (items as ingredients):\n"
    "   - \"Big Mac deal\" -> 1 meal named \"Big Mac Meal\" with ingredients: Big Mac burger, fries, drink\n"
    "   - \"burger with fries and coke\" -> 1 meal with 3 ingredients\n"
    "   - \"chicken combo\" -> 1 meal with all combo items as ingredients\n"
    "   - \"pizza with wings\" -> 1 meal with 2 ingredients\n\n"
    "3. Examples of SEPARATE MEALS (for comparison):\n"
    "   - \"pizza and burger\" -> 2 separate meals (Pizza card, Burger card)\n"
    "   - \"pizza vs burger\" -> 2 separate meals (Pizza card, Burger card)\n"
    "   - \"I had chicken then later ate ice cream\" -> 2 separate meals\n"
    "   - \"breakfast was eggs, lunch was sandwich\" -> 2 separate meals\n\n"
    "4. Calculate dailyTotals as the sum of all meals' nutrients.\n"
    "5. CRITICAL: For each meal, total_nutrients MUST equal the sum of all ingredient nutrients "
    "(calories, protein, carbs and fat). Add up the ingredient values, do NOT estimate separately!\n"
    "6. YOU MUST PROVIDE REALISTIC NUTRITIONAL VALUES - DO NOT USE ZEROS! "
    "Use standard serving sizes and accurate calorie/macro estimates.\n"
)

REFERENCE_VALUES = (
    "For a pizza slice: ~285 calories, 12g protein, 36g carbs, 10g fat\n"
    "For a burger: ~540 calories, 25g protein, 40g carbs, 25g fat\n"
    "For fries (medium): ~365 calories, 4g protein, 48g carbs, 17g fat\n"
    "For a coke (medium): ~210 calories, 0g protein, 58g carbs, 0g fat\n"
)


def build_prompt(food_description: str) -> str:
    return (
        "You are a nutrition expert. Analyze the following food description and return ONLY "
        "a valid JSON object (no markdown, no code blocks, no extra text) with this exact structure:\n\n"
        f"{GROUPING_RULES}\n"
        f"{RESPONSE_SHAPE}\n\n"
        f"{REFERENCE_VALUES}\n"
        f"Food description: \"{food_description}\"\n\n"
        "Return ONLY the JSON object with REAL nutritional values, nothing else."
    )


def parse_analysis(content: Optional[str]) -> AnalysisResult:
    """
    Turn the raw completion text into a corrected AnalysisResult.

    Raises MalformedResponseError for unparseable JSON and
    IncompleteResponseError when the meal-data fields are missing or do not
    validate.
    """
    try:
        data: Any = json.loads(content or "")
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Malformed JSON from AI: {e}") from e

    if not isinstance(data, dict) or data.get("dailyTotals") is None or data.get("loggedMeals") is None:
        raise IncompleteResponseError("Invalid response format from AI")
    try:
        meals = [Meal.model_validate(m) for m in data["loggedMeals"]]
    except (TypeError, ValidationError) as e:
        raise IncompleteResponseError("Invalid response format from AI") from e
    return correct_totals(meals)


class FoodAnalyzer(BaseModel):
    """
    Interface-like base to keep types clear. Concrete impl below.
    """
    def analyze(self, food_description: str) -> AnalysisResult:  # pragma: no cover - interface
        raise NotImplementedError


class OpenAIFoodAnalyzer(FoodAnalyzer):
    _client: Optional[OpenAI]
    _model: str
    _temperature: float

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None):
        super().__init__()
        self._model = settings.openai_model
        self._temperature = settings.openai_temperature
        if client is not None:
            self._client = client
        elif not settings.openai_api_key:
            # Reported per request so a misconfigured deployment still validates input first
            self._client = None
        else:
            try:
                self._client = OpenAI(
                    api_key=settings.openai_api_key,
                    timeout=settings.openai_timeout,
                    max_retries=settings.openai_max_retries,
                )
            except Exception as e:
                raise LLMError("Could not initialize OpenAI client") from e

    def analyze(self, food_description: str) -> AnalysisResult:
        """
        One chat-completion call in JSON mode; totals are recomputed locally.
        """
        if self._client is None:
            raise MissingCredentialError("OpenAI API key not configured")

        t0 = time.perf_counter()
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": SYSTEM_PROMPT},
                          {"role": "user", "content": build_prompt(food_description)}],
                response_format={"type": "json_object"},
                temperature=self._temperature,
            )
        except openai.APIStatusError as e:
            detail = e.body.get("message") if isinstance(e.body, dict) else None
            logger.warning("OpenAI returned %s: %s", e.status_code, detail or e.message)
            raise UpstreamStatusError(detail or "Failed to process food data", e.status_code) from e
        except openai.APIConnectionError as e:
            raise UpstreamTransportError(f"Could not reach OpenAI: {e}") from e
        finally:
            logger.info("analyze_food upstream call took %.0f ms (model=%s)",
                        (time.perf_counter() - t0) * 1000.0, self._model)

        if not resp.choices:
            raise IncompleteResponseError("Invalid response format from AI")
        return parse_analysis(resp.choices[0].message.content)
