"""
Purpose:
- Decide whether a client-supplied URL may be proxied.
- Only absolute https URLs on the archive domain (or a subdomain) pass; this is the proxy's access control.
"""

from __future__ import annotations
from typing import Optional
from urllib.parse import urlparse, ParseResult

def parse_absolute_url(url: Optional[str]) -> Optional[ParseResult]:
    """Return the parsed URL, or None if it is missing or not absolute."""
    if not url:
        return None
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
        _ = parsed.port   # raises ValueError on a garbage port
    except ValueError:
        return None
    if not parsed.scheme or not host:
        return None
    return parsed

def is_host_allowed(host: str, allowed_domain: str) -> bool:
    host = host.lower().rstrip(".")
    domain = allowed_domain.lower()
    return host == domain or host.endswith("." + domain)

def is_url_allowed(parsed: ParseResult, allowed_domain: str) -> bool:
    """True only for https and a host equal to, or under, allowed_domain."""
    return parsed.scheme.lower() == "https" and is_host_allowed(parsed.hostname or "", allowed_domain)
