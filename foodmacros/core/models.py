# foodmacros/core/models.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Rounded totals stay ints; raw upstream values may be fractional.
Number = Union[int, float]


# ---------- Core value objects ----------

class NutrientSet(BaseModel):
    """Macro quantities for one ingredient, one meal, or one day."""
    # Totals go through round(), which rejects NaN and infinity
    model_config = ConfigDict(allow_inf_nan=False)

    calories: Number = 0
    protein: Number = 0
    carbs: Number = 0
    fat: Number = 0

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _null_is_zero(cls, v):
        # The model occasionally emits null for a macro it could not estimate
        return 0 if v is None else v


class Ingredient(BaseModel):
    name: str = Field(..., min_length=1)
    brand: Optional[str] = None
    serving_info: str = ""
    nutrients: NutrientSet = Field(default_factory=NutrientSet)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Ingredient.name cannot be blank")
        return v

    @field_validator("serving_info", mode="before")
    @classmethod
    def _serving_default(cls, v):
        return "" if v is None else v


class Meal(BaseModel):
    meal_name: str = Field(..., min_length=1)
    meal_size: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    total_nutrients: NutrientSet = Field(default_factory=NutrientSet)

    @field_validator("meal_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Meal.meal_name cannot be blank")
        return v

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients_default(cls, v):
        return [] if v is None else v


# ---------- Analysis results ----------

class AnalysisResult(BaseModel):
    """Canonical output of one food-description analysis."""
    model_config = ConfigDict(populate_by_name=True)

    daily_totals: NutrientSet = Field(default_factory=NutrientSet, alias="dailyTotals")
    logged_meals: List[Meal] = Field(default_factory=list, alias="loggedMeals")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class WidgetPayload(BaseModel):
    """Shape the widget tool declares before the host's model fills it in."""
    model_config = ConfigDict(populate_by_name=True)

    food_description: Optional[str] = Field(None, alias="foodDescription")
    daily_totals: Optional[NutrientSet] = Field(None, alias="dailyTotals")
    logged_meals: Optional[List[Meal]] = Field(None, alias="loggedMeals")
    error: Optional[str] = None


# ---------- API request/response envelopes ----------

class AnalyzeFoodRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    food_description: Optional[str] = Field(None, alias="foodDescription")


class ErrorResponse(BaseModel):
    error: str


class CardsResponse(BaseModel):
    state: str
    error: Optional[str] = None
    html: str = ""
