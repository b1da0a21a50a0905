from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from foodmacros.config import Settings, asset_prefix
from foodmacros.web.pages import web_page, widget_page

router = APIRouter(tags=["pages"])


def get_settings() -> Settings:
    return Settings()


@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/web")


@router.get("/web", response_class=HTMLResponse)
def chat_page():
    # Same-origin: the page is served by this app
    return HTMLResponse(web_page())


@router.get("/nmacros", response_class=HTMLResponse)
def widget(settings: Settings = Depends(get_settings)):
    return HTMLResponse(widget_page(asset_prefix(settings)))
