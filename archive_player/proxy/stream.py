"""
Purpose:
- Relay archive audio to browsers with Range support, CORS, and a cache policy that
  never lets a shared cache keep a partial (206) body.
- The URL check in `validate_target` runs before any upstream call; it keeps the proxy
  from becoming an open relay.
"""

from __future__ import annotations
import logging
from typing import Dict, Mapping, Optional
import httpx
from fastapi import Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from ..core.cors import cors_headers
from ..core.errors import ClientError, ProxyUpstreamError
from ..core.settings import Settings
from ..search.whitelist import is_url_allowed, parse_absolute_url

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "HEAD", "OPTIONS")

# request -> upstream, verbatim when present
FORWARDED_REQUEST_HEADERS = ("range", "if-none-match", "if-modified-since")

# upstream -> client; cache-control is overridden afterwards
PASSTHROUGH_RESPONSE_HEADERS = (
    "content-type", "content-length", "content-range", "accept-ranges",
    "etag", "last-modified", "date", "cache-control",
)

NO_STORE = "no-store"

MAX_REDIRECTS = 5

class StreamProxy:
    def __init__(self, http: httpx.AsyncClient, cfg: Settings):
        self._http = http
        self._cfg = cfg

    @property
    def cors(self) -> Dict[str, str]:
        return cors_headers(self._cfg.cors_max_age)

    def shared_cache_control(self) -> str:
        return (
            f"public, s-maxage={self._cfg.stream_shared_max_age}, "
            f"stale-while-revalidate={self._cfg.stream_stale_while_revalidate}"
        )

    def cache_control_for(self, method: str, has_range: bool) -> str:
        """Only a full, non-ranged GET may be cached by intermediaries."""
        if method == "GET" and not has_range:
            return self.shared_cache_control()
        return NO_STORE

    def validate_target(self, url: Optional[str]) -> str:
        parsed = parse_absolute_url(url)
        if parsed is None:
            raise ClientError("Invalid or missing url parameter", headers=self.cors)
        if not is_url_allowed(parsed, self._cfg.archive_domain):
            raise ClientError(
                f"Only https URLs on {self._cfg.archive_domain} are allowed", headers=self.cors
            )
        return parsed.geturl()

    def forwarded_headers(self, incoming: Mapping[str, str]) -> Dict[str, str]:
        lowered = {k.lower(): v for k, v in incoming.items()}
        out = {
            "User-Agent": self._cfg.user_agent,
            # relay bytes exactly as stored; content-length must stay truthful
            "Accept-Encoding": "identity",
        }
        for name in FORWARDED_REQUEST_HEADERS:
            value = lowered.get(name)
            if value:
                out[name.title()] = value
        return out

    def response_headers(self, upstream: httpx.Response, method: str, has_range: bool) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for name in PASSTHROUGH_RESPONSE_HEADERS:
            value = upstream.headers.get(name)
            if value:
                out[name] = value
        out["cache-control"] = self.cache_control_for(method, has_range)
        out.update(self.cors)
        return out

    async def _send_following_archive_redirects(self, request: httpx.Request) -> httpx.Response:
        """download/ redirects to a storage node; every hop must stay on the archive domain."""
        for _ in range(MAX_REDIRECTS + 1):
            upstream = await self._http.send(request, stream=True, follow_redirects=False)
            hop = upstream.next_request
            if hop is None:
                return upstream
            await upstream.aclose()
            parsed = parse_absolute_url(str(hop.url))
            if parsed is None or not is_url_allowed(parsed, self._cfg.archive_domain):
                logger.warning("refusing redirect from %s to %s", request.url, hop.url)
                raise ProxyUpstreamError(
                    "Upstream redirected outside the archive domain", detail=str(hop.url), headers=self.cors
                )
            request = hop
        raise ProxyUpstreamError("Too many upstream redirects", headers=self.cors)

    async def stream(self, method: str, requested_url: Optional[str], incoming: Mapping[str, str]) -> Response:
        method = method.upper()
        if method == "OPTIONS":
            return Response(status_code=204, headers=self.cors)
        if method not in ALLOWED_METHODS:
            raise ClientError("Method not allowed", status_code=405, headers=self.cors)

        target = self.validate_target(requested_url)
        headers = self.forwarded_headers(incoming)
        has_range = "Range" in headers

        timeout = httpx.Timeout(
            self._cfg.stream_read_timeout_seconds, connect=self._cfg.stream_connect_timeout_seconds
        )
        request = self._http.build_request(method, target, headers=headers, timeout=timeout)
        try:
            upstream = await self._send_following_archive_redirects(request)
        except httpx.HTTPError as e:
            logger.warning("upstream fetch failed for %s: %r", target, e)
            raise ProxyUpstreamError("Upstream fetch failed", detail=repr(e), headers=self.cors) from e

        out_headers = self.response_headers(upstream, method, has_range)
        logger.info("stream %s %s -> %s range=%s", method, target, upstream.status_code, has_range)

        if method == "HEAD":
            await upstream.aclose()
            return Response(status_code=upstream.status_code, headers=out_headers)

        return StreamingResponse(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            headers=out_headers,
            background=BackgroundTask(upstream.aclose),
        )
