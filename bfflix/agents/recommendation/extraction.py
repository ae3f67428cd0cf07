"""
Best-effort JSON recovery from free-form model output.

Gemini is asked for pure JSON but regularly wraps it in commentary or
markdown fences. `extract_json` tries, in order:

1. a ```json fenced block
2. the earliest bracketed span, {...} or [...], greedy to the last
   matching closing bracket
3. the whole trimmed text
4. a {"raw": text} carrier

Each attempt is independent and only swallows its own parse error, so the
strategy order is preserved. The function never raises for malformed output.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_BRACKETED_SPAN = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")

# Returned by a strategy when it has nothing to offer
_NO_MATCH = object()


def _try_parse(candidate: Optional[str]) -> Any:
    if candidate is None:
        return _NO_MATCH
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return _NO_MATCH


def _from_fenced_block(text: str) -> Any:
    match = _FENCED_JSON.search(text)
    return _try_parse(match.group(1) if match else None)


def _from_bracketed_span(text: str) -> Any:
    match = _BRACKETED_SPAN.search(text)
    return _try_parse(match.group(0) if match else None)


def _from_whole_text(text: str) -> Any:
    return _try_parse(text)


STRATEGIES: List[Callable[[str], Any]] = [
    _from_fenced_block,
    _from_bracketed_span,
    _from_whole_text,
]


def extract_json(raw_text: Any) -> Any:
    """
    Parse structured data out of a model response.

    Args:
        raw_text: Text exactly as returned by the model client. Already
            structured values (e.g. a previous {"raw": ...} result) are
            serialized first, so re-extracting is safe.

    Returns:
        The first successfully parsed value, or {"raw": <trimmed text>}
        when no strategy produced valid JSON.

    Examples:
        >>> extract_json('Sure!\\n```json\\n[{"title": "Dark"}]\\n```')
        [{'title': 'Dark'}]
        >>> extract_json("no json here")
        {'raw': 'no json here'}
    """
    if raw_text is None:
        raw_text = ""
    elif not isinstance(raw_text, str):
        raw_text = json.dumps(raw_text)
    trimmed = raw_text.strip()

    for strategy in STRATEGIES:
        parsed = strategy(trimmed)
        if parsed is not _NO_MATCH:
            logger.debug(f"Model output parsed via {strategy.__name__}")
            return parsed

    logger.warning("Model output is not valid JSON; returning raw text carrier")
    return {"raw": trimmed}


def is_raw_carrier(payload: Any) -> bool:
    """True when `payload` is the extractor's degraded {"raw": ...} fallback."""
    return isinstance(payload, dict) and set(payload) == {"raw"}
