from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Query

from foodmacros.core.models import CardsResponse
from foodmacros.core.reconcile import reconcile
from foodmacros.web.cards import normalize_variant, render_state

router = APIRouter(tags=["cards"])


@router.post("/api/cards", response_model=CardsResponse)
def render_cards(
    payload: Any = Body(None),
    variant: Optional[str] = Query("web", description="'web' or 'widget'"),
):
    """
    Reconcile any analysis payload (API response or raw widget tool output)
    and return the card markup for it, together with the detected state.
    """
    reconciled = reconcile(payload)
    return CardsResponse(
        state=reconciled.state,
        error=reconciled.error,
        html=render_state(reconciled, normalize_variant(variant)),
    )
