from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional, List
from dotenv import load_dotenv
load_dotenv()  # populates os.environ from .env


class Settings(BaseSettings):
    # LLM
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_timeout: float = 60.0
    # The SDK retries twice by default; keep upstream calls single-shot unless configured.
    openai_max_retries: int = Field(0, ge=0)

    # Deployment / base URL resolution
    app_env: str = "production"
    port: int = 8000
    base_url: Optional[str] = None
    vercel_env: Optional[str] = None
    vercel_project_production_url: Optional[str] = None
    vercel_branch_url: Optional[str] = None
    vercel_url: Optional[str] = None

    # Observability
    log_level: str = "INFO"
    enable_tracing: bool = False
    tracing_endpoint: str = "http://127.0.0.1:6006/v1/traces"

    # CORS; the widget host fetches /api/cards cross-origin
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def resolve_base_url(settings: Settings) -> Optional[str]:
    """Public origin of this deployment, used to prefix widget assets and API calls."""
    if settings.base_url:
        return settings.base_url.rstrip("/")
    if settings.app_env == "development":
        return f"http://localhost:{settings.port}"
    if settings.vercel_env == "production":
        host = settings.vercel_project_production_url
    else:
        host = settings.vercel_branch_url or settings.vercel_url
    return f"https://{host}" if host else None


def asset_prefix(settings: Settings) -> str:
    """Base URL when it is a usable absolute http(s) URL, else "" (same-origin)."""
    url = resolve_base_url(settings)
    if url and url.startswith("http"):
        return url
    return ""
