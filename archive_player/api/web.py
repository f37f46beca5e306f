"""
Purpose:
- Serve the single-page player as a static asset. No shared state with the API routes.
"""

from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
INDEX_HTML = STATIC_DIR / "index.html"

router = APIRouter(tags=["web"])

@router.get("/", include_in_schema=False)
def index():
    return FileResponse(INDEX_HTML, media_type="text/html; charset=utf-8")
