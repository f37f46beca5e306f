"""
Purpose:
- FastAPI application factory and router mounts.
- Owns the pooled httpx client (lifespan) and the shared CORS/error handling.
- Uvicorn will serve this on 0.0.0.0:8000 by default (see `run`).
"""

from contextlib import asynccontextmanager
from typing import Optional
import httpx
from fastapi import FastAPI
from .core.cors import ALLOW_METHODS, EXPOSE_HEADERS, RouteAwareCORSMiddleware
from .core.errors import install_error_handlers
from .core.http import create_http_client
from .core.logging import configure_logging
from .core.settings import Settings, get_settings, settings
from .api.health import router as health_router
from .api.search import router as search_router
from .api.stream import router as stream_router
from .api.web import router as web_router
from .search.files import STREAM_PATH

def create_app(cfg: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    cfg = cfg or get_settings()
    configure_logging(cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # an injected client (tests) is owned by the caller
        owned = http_client is None
        app.state.http_client = http_client or create_http_client(cfg)
        try:
            yield
        finally:
            if owned:
                await app.state.http_client.aclose()

    app = FastAPI(title="Archive Player API", version="0.1.0", lifespan=lifespan)
    app.state.settings = cfg
    app.add_middleware(
        RouteAwareCORSMiddleware,
        self_served_paths=[STREAM_PATH],
        allow_origins=["*"],
        allow_methods=ALLOW_METHODS,
        allow_headers=["*"],
        expose_headers=EXPOSE_HEADERS,
        max_age=cfg.cors_max_age,
    )
    install_error_handlers(app)

    app.include_router(web_router)
    app.include_router(search_router)
    app.include_router(stream_router)
    app.include_router(health_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "archive_player.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower()
    )
