"""
Purpose:
- Talk to the Internet Archive: advanced search for candidates, /metadata/{id} for file listings.
- Parse loosely-typed upstream JSON into small dataclasses; anything malformed raises ValueError.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union
from urllib.parse import quote
import httpx
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["identifier", "title", "creator", "downloads"]
SEARCH_SORT = "downloads desc"

Creator = Union[str, List[str], None]

@dataclass
class CandidateItem:
    identifier: str
    title: Optional[str] = None
    creator: Creator = None
    downloads: int = 0

@dataclass
class FileEntry:
    name: str
    format: str = ""

@dataclass
class ItemMetadata:
    identifier: str
    title: Optional[str] = None
    creator: Creator = None
    files: List[FileEntry] = field(default_factory=list)

def build_search_query(query: str) -> str:
    # audio only; licenseurl:* drops anything without an explicit license
    return f"({query}) AND mediatype:(audio) AND licenseurl:*"

def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        value = value[0] if value else None
        if value is None:
            return None
    text = str(value).strip()
    return text or None

def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0

def parse_candidates(payload: Any) -> List[CandidateItem]:
    if not isinstance(payload, dict):
        raise ValueError("search response is not an object")
    response = payload.get("response")
    docs = response.get("docs") if isinstance(response, dict) else None
    if not isinstance(docs, list):
        return []
    out: List[CandidateItem] = []
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        out.append(CandidateItem(
            identifier=str(doc.get("identifier") or "").strip(),
            title=_opt_str(doc.get("title")),
            creator=doc.get("creator"),
            downloads=_as_int(doc.get("downloads")),
        ))
    return out

def parse_metadata(identifier: str, payload: Any) -> ItemMetadata:
    if not isinstance(payload, dict):
        raise ValueError(f"metadata for {identifier} is not an object")
    meta = payload.get("metadata")
    meta = meta if isinstance(meta, dict) else {}
    raw_files = payload.get("files")
    files: List[FileEntry] = []
    if isinstance(raw_files, list):
        for f in raw_files:
            if not isinstance(f, dict):
                continue
            files.append(FileEntry(name=str(f.get("name") or ""), format=str(f.get("format") or "")))
    return ItemMetadata(
        identifier=identifier,
        title=_opt_str(meta.get("title")),
        creator=meta.get("creator"),
        files=files,
    )

class ArchiveClient:
    """Thin async wrapper over the archive's search and metadata endpoints."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = "https://archive.org"):
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def search_candidates(self, query: str, rows: int) -> List[CandidateItem]:
        """
        Query advancedsearch.php sorted by downloads.
        Any failure here is an UpstreamError: without candidates there is nothing to return.
        """
        params = [
            ("output", "json"),
            ("q", build_search_query(query)),
            *[("fl[]", f) for f in SEARCH_FIELDS],
            ("sort[]", SEARCH_SORT),
            ("rows", str(rows)),
            ("page", "1"),
        ]
        url = f"{self._base_url}/advancedsearch.php"
        try:
            resp = await self._http.get(url, params=params, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning("advancedsearch request failed: %r", e)
            raise UpstreamError("Search failed", detail=f"advancedsearch request failed: {e!r}") from e
        if not resp.is_success:
            logger.warning("advancedsearch returned %s", resp.status_code)
            raise UpstreamError("Search failed", detail=f"advancedsearch error {resp.status_code}")
        try:
            return parse_candidates(resp.json())
        except ValueError as e:
            logger.warning("advancedsearch returned an unreadable body: %s", e)
            raise UpstreamError("Search failed", detail=f"advancedsearch body unreadable: {e}") from e

    async def fetch_metadata(self, identifier: str) -> ItemMetadata:
        """Raises httpx.HTTPError (transport or status) or ValueError (body); callers decide."""
        url = f"{self._base_url}/metadata/{quote(identifier, safe='')}"
        resp = await self._http.get(url, headers={"Accept": "application/json"})
        resp.raise_for_status()
        return parse_metadata(identifier, resp.json())
