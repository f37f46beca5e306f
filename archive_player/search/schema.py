"""
Purpose:
- Pydantic models for search in/out so the API is self-documenting and stable.
- Field names match what the browser player reads (streamUrl, not stream_url).
"""

from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional

class ResultEntry(BaseModel):
    title: str
    creator: str = ""
    identifier: str
    streamUrl: str = Field(..., description="Proxy-relative /api/stream?url=... reference")

class SearchResponse(BaseModel):
    results: List[ResultEntry] = []

class ErrorBody(BaseModel):
    error: str
    detail: Optional[str] = None
