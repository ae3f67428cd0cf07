"""
Compact textual viewing profile for recommendation prompts.

Each viewing becomes one fragment list, e.g.:

    TV Show id 1399, S2E5, rated 4/5, comment "great one"

Fragments of one viewing are joined with ", " and viewings with "; ".
"""

from typing import Iterable, List, Sequence

from bfflix.schemas.viewings import ViewingRecord
from bfflix.utils.constants import MEDIA_TYPE_LABELS, NO_PLATFORMS_TOKEN


def describe_viewing(record: ViewingRecord) -> str:
    """Render a single viewing as comma-joined fragments."""
    parts: List[str] = [f"{MEDIA_TYPE_LABELS[record.media_type]} id {record.tmdb_id}"]

    if record.season_number is not None and record.episode_number is not None:
        parts.append(f"S{record.season_number}E{record.episode_number}")

    if record.rating is not None:
        parts.append(f"rated {record.rating}/5")

    if record.comment:
        # Double quotes would close the quoted fragment early
        comment = record.comment.replace('"', "'")
        parts.append(f'comment "{comment}"')

    return ", ".join(parts)


def build_viewing_profile(records: Sequence[ViewingRecord]) -> str:
    """
    Build the profile text from recent viewings.

    Args:
        records: Viewings ordered most recent first (already limited by the
            history provider)

    Returns:
        Semicolon-joined description of every viewing, in the given order.
    """
    return "; ".join(describe_viewing(record) for record in records)


def format_platforms(platforms: Iterable[str]) -> str:
    """Comma-joined platform names, or an explicit "none set" token."""
    names = [name for name in platforms if name]
    return ", ".join(names) if names else NO_PLATFORMS_TOKEN
