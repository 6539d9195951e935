"""Release identifier generation

Release ids have the form ``YYYYMMDD-HHMMSS-<rev7>``: a local, fixed-width
timestamp followed by the first seven characters of the source revision.
Ids sort lexicographically in creation order. Two deployments of the same
revision within the same second produce the same id.
"""

from datetime import datetime
from typing import Optional

from ..constants import RELEASE_TIMESTAMP_FORMAT, SHORT_REVISION_LENGTH, UNKNOWN_REVISION


def format_timestamp(now: datetime) -> str:
    """Format a local time as YYYYMMDD-HHMMSS"""
    return now.strftime(RELEASE_TIMESTAMP_FORMAT)


def short_revision(revision: Optional[str]) -> str:
    """Truncate a revision to its short form

    Args:
        revision: Full revision (commit SHA), or None when unavailable

    Returns:
        First seven characters, or ``unknown``
    """
    if not revision:
        revision = UNKNOWN_REVISION
    return revision[:SHORT_REVISION_LENGTH]


def generate_release_id(now: datetime, revision: Optional[str]) -> str:
    """Build a release id from a timestamp and revision"""
    return f"{format_timestamp(now)}-{short_revision(revision)}"
