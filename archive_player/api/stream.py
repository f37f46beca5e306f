"""
Purpose:
- Expose /api/stream: CORS-friendly, Range-aware relay restricted to the archive domain.
"""

from typing import Optional
import httpx
from fastapi import APIRouter, Depends, Query, Request
from ..core.http import get_app_settings, get_http_client
from ..core.settings import Settings
from ..proxy.stream import StreamProxy

router = APIRouter(prefix="/api", tags=["stream"])

# routed for every verb; StreamProxy answers 405 itself (with CORS headers)
_ALL_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]

def get_stream_proxy(
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_app_settings),
) -> StreamProxy:
    return StreamProxy(http, cfg)

@router.api_route("/stream", methods=_ALL_METHODS)
async def stream(
    request: Request,
    url: Optional[str] = Query(default=None, description="https archive.org file URL"),
    proxy: StreamProxy = Depends(get_stream_proxy),
):
    return await proxy.stream(request.method, url, request.headers)
