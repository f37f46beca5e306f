"""
Purpose:
- Error taxonomy shared by the resolver and the stream proxy.
- FastAPI exception handlers that render every failure as {"error": ..., "detail"?: ...}.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

class ArchivePlayerError(Exception):
    """Base class; carries everything needed to build the JSON error response."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers or {}

class ClientError(ArchivePlayerError):
    """Malformed input, disallowed method or disallowed target. Never reaches upstream."""

    status_code = 400

class UpstreamError(ArchivePlayerError):
    """Search index unreachable or answered with a non-success status."""

    status_code = 502

class ProxyUpstreamError(ArchivePlayerError):
    """Stream fetch raised before any upstream response was received."""

    status_code = 502

def error_body(message: str, detail: Optional[str] = None) -> Dict[str, str]:
    body = {"error": message}
    if detail:
        body["detail"] = detail
    return body

def json_error(message: str, status_code: int = 400, *, detail: Optional[str] = None,
               headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(error_body(message, detail), status_code=status_code, headers=headers)

async def _archive_player_error_handler(_: Request, exc: ArchivePlayerError) -> JSONResponse:
    return json_error(exc.message, exc.status_code, detail=exc.detail, headers=exc.headers)

async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return json_error(str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))

def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ArchivePlayerError, _archive_player_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
