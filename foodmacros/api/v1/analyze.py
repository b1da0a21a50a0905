from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from foodmacros.config import Settings
from foodmacros.core.models import AnalysisResult, AnalyzeFoodRequest, ErrorResponse
from foodmacros.services.exceptions import GENERIC_FAILURE, ServiceError
from foodmacros.services.llm import FoodAnalyzer, OpenAIFoodAnalyzer

router = APIRouter(tags=["analyze"])
logger = logging.getLogger(__name__)

MISSING_DESCRIPTION = "Food description is required"

# ---- Dependencies ------------------------------------------------------------

def get_settings() -> Settings:
    return Settings()

def get_analyzer(settings: Settings = Depends(get_settings)) -> FoodAnalyzer:
    return OpenAIFoodAnalyzer(settings)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)

# ---- Route ------------------------------------------------------------------

@router.post(
    "/api/analyze-food",
    response_model=AnalysisResult,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze_food(
    body: AnalyzeFoodRequest,
    analyzer: FoodAnalyzer = Depends(get_analyzer),
):
    description = (body.food_description or "").strip()
    if not description:
        return error_response(MISSING_DESCRIPTION, 400)

    try:
        result = analyzer.analyze(description)
    except ServiceError as e:
        # Terminal for this request; nothing is retried
        logger.warning("Food analysis failed (%s): %s", type(e).__name__, e)
        return error_response(str(e), e.status_code)
    except Exception:
        logger.exception("Unexpected error analyzing food")
        return error_response(GENERIC_FAILURE, 500)

    return result.to_wire()
