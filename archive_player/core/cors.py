"""
Purpose:
- The CORS header set attached to every /api/stream response (errors included).
- App-wide CORSMiddleware advertising the same policy, except on paths that answer
  CORS themselves (their preflight must be an empty 204 with the full header set).
"""

from typing import Dict, List, Sequence
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

ALLOW_METHODS: List[str] = ["GET", "HEAD", "OPTIONS"]
EXPOSE_HEADERS: List[str] = [
    "Content-Length", "Content-Range", "Accept-Ranges", "Content-Type", "ETag", "Last-Modified",
]

def cors_headers(max_age: int = 86400) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(ALLOW_METHODS),
        "Access-Control-Allow-Headers": "*",
        "Access-Control-Max-Age": str(max_age),
        "Access-Control-Expose-Headers": ", ".join(EXPOSE_HEADERS),
    }

class RouteAwareCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that hands requests under `self_served_paths` straight to the app."""

    def __init__(self, app: ASGIApp, self_served_paths: Sequence[str] = (), **kwargs):
        super().__init__(app, **kwargs)
        self.self_served_paths = tuple(self_served_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.self_served_paths):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
