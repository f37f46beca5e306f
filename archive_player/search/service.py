"""
Purpose:
- The "service" orchestrates query -> candidates -> per-item metadata -> playable file -> result.
- Metadata fetches run concurrently (bounded) and stop as soon as `limit` results are settled.
- Output order always follows the search index's popularity order.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple
import httpx
from .archive import ArchiveClient, CandidateItem
from .files import build_download_url, build_stream_reference, normalize_creator, pick_playable_file
from .schema import ResultEntry
from ..core.errors import ClientError
from ..core.settings import Settings

logger = logging.getLogger(__name__)

def clamp_limit(raw: Optional[str], default: int = 10, maximum: int = 25) -> int:
    """
    Silently coerce a user-supplied limit into [1, maximum].
    Missing, non-numeric, zero or negative values fall back to `default`.
    """
    if raw is None:
        return default
    try:
        value = int(float(raw.strip()))
    except (ValueError, OverflowError):
        return default
    if value < 1:
        return default
    return min(value, maximum)

def _settled(resolved: Dict[int, Optional[ResultEntry]], limit: int) -> bool:
    # Only the contiguous prefix counts: an earlier unresolved candidate could still win a slot.
    found = 0
    idx = 0
    while idx in resolved:
        if resolved[idx] is not None:
            found += 1
            if found >= limit:
                return True
        idx += 1
    return False

class SearchService:
    def __init__(self, archive: ArchiveClient, cfg: Settings):
        self._archive = archive
        self._cfg = cfg

    def rows_for(self, limit: int) -> int:
        return min(limit * 2, self._cfg.search_rows_ceiling)

    async def search(self, query: Optional[str], limit: int) -> List[ResultEntry]:
        q = (query or "").strip()
        if not q:
            raise ClientError("Missing query parameter: q")
        limit = max(1, min(limit, self._cfg.search_max_limit))

        candidates = await self._archive.search_candidates(q, rows=self.rows_for(limit))
        results = await self._resolve_in_order(candidates, limit)
        logger.info("search q=%r limit=%d candidates=%d results=%d", q, limit, len(candidates), len(results))
        return results

    async def _resolve_in_order(self, candidates: Sequence[CandidateItem], limit: int) -> List[ResultEntry]:
        if not candidates:
            return []
        gate = asyncio.Semaphore(self._cfg.candidate_concurrency)
        resolved: Dict[int, Optional[ResultEntry]] = {}

        async def worker(idx: int, cand: CandidateItem) -> Tuple[int, Optional[ResultEntry]]:
            async with gate:
                return idx, await self.resolve_candidate(cand)

        tasks = [asyncio.create_task(worker(i, c)) for i, c in enumerate(candidates)]
        try:
            for next_done in asyncio.as_completed(tasks):
                idx, entry = await next_done
                resolved[idx] = entry
                if _settled(resolved, limit):
                    break
        finally:
            pending = [t for t in tasks if not t.done()]
            for t in pending:
                t.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
                logger.debug("cancelled %d pending metadata fetches", len(pending))

        ordered = [resolved[i] for i in sorted(resolved)]
        return [e for e in ordered if e is not None][:limit]

    async def resolve_candidate(self, cand: CandidateItem) -> Optional[ResultEntry]:
        """
        Turn one candidate into a result, or None to skip it.
        Failures are swallowed on purpose: one broken item must not sink the search.
        """
        if not cand.identifier:
            return None
        try:
            meta = await self._archive.fetch_metadata(cand.identifier)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("skip %s: metadata unavailable (%r)", cand.identifier, e)
            return None

        chosen = pick_playable_file(meta.files)
        if chosen is None:
            logger.debug("skip %s: no playable file among %d", cand.identifier, len(meta.files))
            return None

        download_url = build_download_url(cand.identifier, chosen.name, self._cfg.archive_base_url)
        return ResultEntry(
            title=cand.title or meta.title or cand.identifier,
            creator=normalize_creator(cand.creator or meta.creator),
            identifier=cand.identifier,
            streamUrl=build_stream_reference(download_url),
        )
