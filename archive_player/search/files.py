"""
Purpose:
- Pick the one playable file of an item (mp3 before ogg, never playlists).
- Build the archive download URL and wrap it into a proxy-relative stream reference.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote
from .archive import Creator, FileEntry

STREAM_PATH = "/api/stream"

PLAYLIST_EXTENSIONS = (".m3u", ".m3u8")

# same unreserved set as JS encodeURIComponent
_COMPONENT_SAFE = "!*'()"

def is_playlist(f: FileEntry) -> bool:
    return f.name.lower().endswith(PLAYLIST_EXTENSIONS)

def _name_ends(ext: str) -> Callable[[FileEntry], bool]:
    return lambda f: f.name.lower().endswith(ext)

def _format_has(token: str) -> Callable[[FileEntry], bool]:
    return lambda f: token in f.format.lower()

# Preference order; first tier with a match wins, first file within a tier wins.
SELECTION_TIERS: List[Callable[[FileEntry], bool]] = [
    _name_ends(".mp3"),
    _format_has("mp3"),
    _name_ends(".ogg"),
    _format_has("ogg"),
]

def pick_playable_file(files: Sequence[FileEntry]) -> Optional[FileEntry]:
    eligible = [f for f in files if not is_playlist(f)]
    for matches in SELECTION_TIERS:
        for f in eligible:
            if matches(f):
                return f
    return None

def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)

def build_download_url(identifier: str, name: str, base_url: str = "https://archive.org") -> str:
    """Each path segment is encoded on its own so '/' in nested file names survives."""
    path = "/".join(encode_component(seg) for seg in name.split("/"))
    return f"{base_url.rstrip('/')}/download/{encode_component(identifier)}/{path}"

def build_stream_reference(download_url: str) -> str:
    return f"{STREAM_PATH}?url={encode_component(download_url)}"

def normalize_creator(creator: Creator) -> str:
    if not creator:
        return ""
    if isinstance(creator, list):
        return ", ".join(str(c) for c in creator if c)
    return str(creator)
