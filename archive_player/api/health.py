# Common language: Environment/ops probe that surfaces library versions and the effective upstream config.
# Use this after deploys/upgrades to confirm no silent drift.

from fastapi import APIRouter, Request
import sys, importlib

router = APIRouter(tags=["health"])

def _ver(modname: str) -> str:
    try:
        m = importlib.import_module(modname)
        return getattr(m, "__version__", "unknown")
    except ImportError:
        return "not-installed"

@router.get("/healthz")
def healthz(request: Request):
    cfg = request.app.state.settings
    return {
        "status": "ok",
        "python": sys.version.split()[0],
        "versions": {
            "fastapi": _ver("fastapi"),
            "starlette": _ver("starlette"),
            "uvicorn": _ver("uvicorn"),
            "httpx": _ver("httpx"),
            "pydantic": _ver("pydantic"),
            "pydantic_settings": _ver("pydantic_settings"),
        },
        "config": {
            "archive_base_url": cfg.archive_base_url,
            "archive_domain": cfg.archive_domain,
            "search_max_limit": cfg.search_max_limit,
            "search_rows_ceiling": cfg.search_rows_ceiling,
            "candidate_concurrency": cfg.candidate_concurrency,
            "upstream_timeout_seconds": cfg.upstream_timeout_seconds,
        },
    }
