"""
Purpose:
- Expose /api/search backing the archive resolver.
- Query parsing stays lenient: `limit` is clamped, never rejected.
"""

from typing import Optional
import httpx
from fastapi import APIRouter, Depends, Query, Request
from ..core.errors import ClientError
from ..core.http import get_app_settings, get_http_client
from ..core.settings import Settings
from ..search.archive import ArchiveClient
from ..search.schema import SearchResponse
from ..search.service import SearchService, clamp_limit

router = APIRouter(prefix="/api", tags=["search"])

# every verb is routed here so non-GET gets the JSON 405 body
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

def get_search_service(
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_app_settings),
) -> SearchService:
    return SearchService(ArchiveClient(http, cfg.archive_base_url), cfg)

@router.api_route("/search", methods=_ALL_METHODS, response_model=SearchResponse)
async def search(
    request: Request,
    q: Optional[str] = Query(default=None, description="Free-text query"),
    limit: Optional[str] = Query(default=None, description="1-25, default 10; out-of-range values are clamped"),
    service: SearchService = Depends(get_search_service),
):
    if request.method != "GET":
        raise ClientError("Method not allowed", status_code=405)
    cfg = request.app.state.settings
    n = clamp_limit(limit, default=cfg.search_default_limit, maximum=cfg.search_max_limit)
    results = await service.search(q, n)
    return SearchResponse(results=results)
