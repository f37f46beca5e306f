"""
Purpose:
- Build the pooled httpx.AsyncClient used for every upstream call.
- Expose it to routes through a FastAPI dependency (stored on app.state by the lifespan).
"""

import httpx
from fastapi import Request
from .settings import Settings

def create_http_client(cfg: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(cfg.upstream_timeout_seconds),
        headers={"User-Agent": cfg.user_agent},
        follow_redirects=True,
    )

def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
