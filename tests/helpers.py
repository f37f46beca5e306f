from __future__ import annotations

import asyncio
from typing import Any, Callable
from urllib.parse import unquote

import httpx

from archive_player.core.settings import Settings


def upstream_response(status: int, body: bytes = b"", headers: dict[str, str] | None = None) -> httpx.Response:
    """An unread upstream answer, the way a streamed network response arrives."""
    headers = dict(headers or {})
    if body:
        headers.setdefault("content-length", str(len(body)))
    return httpx.Response(status, headers=headers, stream=httpx.ByteStream(body))


def make_settings(**overrides: Any) -> Settings:
    return Settings(_env_file=None, **overrides)


def doc(identifier: str, title: str | None = None, creator: Any = None, downloads: int = 0) -> dict:
    out: dict[str, Any] = {"identifier": identifier, "downloads": downloads}
    if title is not None:
        out["title"] = title
    if creator is not None:
        out["creator"] = creator
    return out


def item(*files: tuple[str, str], title: str | None = None, creator: Any = None) -> dict:
    metadata: dict[str, Any] = {}
    if title is not None:
        metadata["title"] = title
    if creator is not None:
        metadata["creator"] = creator
    return {"metadata": metadata, "files": [{"name": name, "format": fmt} for name, fmt in files]}


class FakeArchive:
    """Serves advancedsearch.php and /metadata/{id} from in-memory fixtures.

    `items` values may be a metadata payload (dict), an int status code, an exception
    instance to raise, or a callable returning one of those.
    """

    def __init__(self, docs: list[dict] | None = None, items: dict[str, Any] | None = None,
                 search_status: int = 200, search_error: Exception | None = None,
                 delays: dict[str, float] | None = None):
        self.docs = docs or []
        self.items = items or {}
        self.search_status = search_status
        self.search_error = search_error
        self.delays = delays or {}
        self.search_requests: list[httpx.Request] = []
        self.metadata_calls: list[str] = []
        self.download_urls: list[str] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/advancedsearch.php":
            self.search_requests.append(request)
            if self.search_error is not None:
                raise self.search_error
            if self.search_status != 200:
                return httpx.Response(self.search_status, text="unavailable")
            return httpx.Response(200, json={"response": {"numFound": len(self.docs), "docs": self.docs}})
        if path.startswith("/metadata/"):
            identifier = unquote(path[len("/metadata/"):])
            self.metadata_calls.append(identifier)
            # always yield, like real I/O, so completions interleave with the caller
            await asyncio.sleep(self.delays.get(identifier, 0))
            answer = self.items.get(identifier, {})
            if callable(answer):
                answer = answer()
            if isinstance(answer, Exception):
                raise answer
            if isinstance(answer, int):
                return httpx.Response(answer, json={"error": "nope"})
            if isinstance(answer, str):
                return httpx.Response(200, text=answer)
            return httpx.Response(200, json=answer)
        if path.startswith("/download/"):
            self.download_urls.append(str(request.url))
            return upstream_response(200, b"ID3audio", {"content-type": "audio/mpeg"})
        return httpx.Response(404, text="not found")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True)


class FakeDownloads:
    """Records proxied requests and answers with a canned response."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response] | None = None,
                 error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self.respond = respond or (lambda request: upstream_response(200, b"ID3audio"))
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.respond(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True)
