"""
Logging utilities for the BFFlix backend.

Modules log through `logging.getLogger(__name__)`; the root handler is
installed once by `configure_logging` (called from bfflix.main and scripts).

PRIVACY RULES:
- NEVER log Supabase Auth tokens, API keys, or secrets
- NEVER log viewing comments (free text written by the user)
- NEVER log full prompts or model responses; use `preview()` at debug level
- Queries are logged truncated to 50 characters

Fine to log: user ids, counts (history_count, platforms), cache hit/miss,
pipeline branch taken, error kinds.
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO (one line per HTTP request)
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "google_genai.models")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: Union[int, str, None] = None) -> None:
    """
    Install the root handler.

    Args:
        level: A logging level or its name (e.g. settings.LOG_LEVEL)
    """
    resolved = _resolve_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    if resolved > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def preview(text: Optional[str], limit: int = 200) -> str:
    """Shorten free text for debug logs."""
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
