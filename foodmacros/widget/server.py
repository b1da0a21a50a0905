"""
Food Macros widget server (FastMCP)

Exposes the meal-card widget to an external chat host:

- resource `ui://widget/macros-template.html`: the widget markup
  (text/html+skybridge), rendered by /nmacros
- tool `analyze_food(foodDescription)`: declares the meal-data contract.
  The host's own model fills in dailyTotals/loggedMeals; this server only
  supplies the display surface and the shape.
"""
from __future__ import annotations

import logging
from typing import Annotated, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import TextContent
from pydantic import BaseModel, Field

from foodmacros.config import Settings, asset_prefix, resolve_base_url
from foodmacros.core.models import WidgetPayload
from foodmacros.services.exceptions import GENERIC_FAILURE
from foodmacros.web.pages import widget_page

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
WIDGET_MIME_TYPE = "text/html+skybridge"


class ContentWidget(BaseModel):
    id: str
    title: str
    template_uri: str
    invoking: str
    invoked: str
    description: str
    widget_domain: Optional[str] = None


def macros_widget(settings: Settings) -> ContentWidget:
    return ContentWidget(
        id="analyze_food",
        title="Analyze Food Macros",
        template_uri="ui://widget/macros-template.html",
        invoking="Analyzing food nutrition...",
        invoked="Food analysis complete",
        description="Analyzes food descriptions and displays nutritional information in meal cards",
        widget_domain=resolve_base_url(settings),
    )


def widget_meta(widget: ContentWidget) -> dict:
    return {
        "openai/outputTemplate": widget.template_uri,
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
        "openai/widgetAccessible": False,
        "openai/resultCanProduceWidget": True,
    }


def resource_meta(widget: ContentWidget) -> dict:
    meta = {
        "openai/widgetDescription": widget.description,
        "openai/widgetPrefersBorder": True,
    }
    if widget.widget_domain:
        meta["openai/widgetDomain"] = widget.widget_domain
    return meta


TOOL_DESCRIPTION = """You are a nutrition expert. When given a food description, you MUST analyze it using your built-in nutrition knowledge and generate a complete JSON object with nutritional information.

CRITICAL: You must analyze the food description and generate the complete meal data BEFORE returning the tool response. The structuredContent field MUST contain:
- dailyTotals: { calories: number, protein: number, carbs: number, fat: number }
- loggedMeals: array of complete meal objects with ingredients

STEP-BY-STEP PROCESS:
1. Read the foodDescription parameter
2. Use your nutrition knowledge to analyze the food
3. Extract weight/portion information (e.g., "100g", "medium", "large")
4. Calculate accurate nutritional values based on standard serving sizes
5. Group items into meals according to the rules below
6. Generate the complete JSON structure with dailyTotals and loggedMeals
7. Return this complete data in the structuredContent field

YOU MUST GENERATE THE COMPLETE ANALYSIS - do not return placeholder values or null.

RULES FOR MEAL GROUPING:
- If items are part of a COMBO/MEAL/DEAL or mentioned WITH each other: Create ONE meal with items as ingredients
- If items are separate (mentioned with "and" but not a combo): Create separate meals
- Always provide realistic nutritional values - never use zeros
- Calculate dailyTotals as the sum of all meals' nutrients

REQUIRED JSON STRUCTURE (return this exact format):
{
  "dailyTotals": {"calories": <number>, "protein": <grams>, "carbs": <grams>, "fat": <grams>},
  "loggedMeals": [
    {
      "meal_name": "<meal name>",
      "meal_size": "<size or weight from description, e.g., '100g', 'Medium', '6 pieces'>",
      "total_nutrients": {"calories": <number>, "protein": <grams>, "carbs": <grams>, "fat": <grams>},
      "ingredients": [
        {
          "name": "<ingredient name>",
          "brand": "<brand name or 'Generic'>",
          "serving_info": "<serving description, e.g., '1 serving (100g)'>",
          "nutrients": {"calories": <number>, "protein": <grams>, "carbs": <grams>, "fat": <grams>}
        }
      ]
    }
  ]
}

EXAMPLES:
- "100g blueberries" -> 1 meal with 57 calories, 1g protein, 14g carbs, 0g fat
- "Big Mac meal" -> 1 meal with ingredients: Big Mac, fries, drink
- "pizza and burger" -> 2 separate meals"""

FOOD_DESCRIPTION_HELP = (
    "The food description from the user (e.g., 'I had 100g of blueberries', "
    "'Big Mac meal', 'pizza and burger')"
)


def analysis_instructions(food_description: str) -> str:
    return (
        f'Analyze this food: "{food_description}"\n\n'
        "You must analyze this food using your nutrition knowledge and return a complete JSON object with:\n"
        "- dailyTotals: { calories, protein, carbs, fat }\n"
        "- loggedMeals: array of meal objects with meal_name, meal_size, total_nutrients, and ingredients\n\n"
        "Return the analysis in the structuredContent field with the exact structure specified "
        "in the tool description."
    )


def build_tool_result(food_description: str) -> ToolResult:
    """Placeholder result the host's model completes; the widget shows a
    loading state until loggedMeals arrives."""
    payload = WidgetPayload(food_description=food_description)
    return ToolResult(
        content=[TextContent(type="text", text=analysis_instructions(food_description))],
        structured_content=payload.model_dump(by_alias=True, exclude={"error"}),
    )


def build_error_result(food_description: str, error: Exception) -> ToolResult:
    payload = WidgetPayload(error=str(error) or GENERIC_FAILURE)
    return ToolResult(
        content=[TextContent(type="text",
                             text=f"Error processing food analysis request: {food_description}")],
        structured_content=payload.model_dump(by_alias=True, include={"error"}),
    )


async def fetch_widget_html(settings: Settings) -> str:
    """
    Widget markup as served by this deployment's /nmacros page.

    Falls back to rendering in-process when no base URL resolves or the
    deployment cannot be reached.
    """
    base_url = resolve_base_url(settings)
    if base_url:
        try:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
                response = await client.get(f"{base_url}/nmacros")
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            logger.warning("Could not fetch widget markup from %s: %s", base_url, e)
    return widget_page(asset_prefix(settings))


class ResourceContentsMeta(Middleware):
    """Attach `_meta` to the contents returned by `resources/read`.

    Hosts read the widget domain from the read contents, not from the
    resource listing, and FastMCP only puts a resource's `meta` on the latter.
    """

    def __init__(self, uri: str, meta: dict):
        self.uri = uri
        self.meta = meta

    async def on_read_resource(self, context: MiddlewareContext, call_next):
        contents = await call_next(context)
        if str(context.message.uri) != self.uri:
            return contents
        return [
            ReadResourceContents(content=c.content, mime_type=c.mime_type, meta=self.meta)
            for c in contents
        ]


def build_widget_server(settings: Settings) -> FastMCP:
    widget = macros_widget(settings)
    mcp = FastMCP("Food Macros")
    mcp.add_middleware(ResourceContentsMeta(widget.template_uri, resource_meta(widget)))

    @mcp.resource(
        widget.template_uri,
        name="macros-widget",
        title=widget.title,
        description=widget.description,
        mime_type=WIDGET_MIME_TYPE,
        meta=resource_meta(widget),
    )
    async def macros_template() -> str:
        html = await fetch_widget_html(settings)
        return f"<html>{html}</html>"

    @mcp.tool(
        name=widget.id,
        title=widget.title,
        description=TOOL_DESCRIPTION,
        output_schema=WidgetPayload.model_json_schema(by_alias=True),
        meta=widget_meta(widget),
    )
    def analyze_food(
        foodDescription: Annotated[str, Field(description=FOOD_DESCRIPTION_HELP)],
    ) -> ToolResult:
        try:
            return build_tool_result(foodDescription)
        except Exception as e:
            logger.exception("analyze_food tool failed")
            return build_error_result(foodDescription, e)

    return mcp
