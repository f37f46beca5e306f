"""
Purpose:
- One place to configure stdlib logging for the service.
- Modules log through logging.getLogger(__name__); uvicorn keeps its own handlers.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("archive_player").setLevel(resolved)
    # httpx logs every request at INFO; too chatty for per-candidate fan-out
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
