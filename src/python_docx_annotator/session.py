"""
Per-session annotation state.

Comment ids and revision ids must stay consistent across every change
applied through one session. They live here rather than in module globals so
two sessions over the same file never share counters. Whether revision
tracking is on is a property of each document, kept by TrackingSettings.
"""

import re
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from .constants import REVISION_ID_PREFIX, TIMESTAMP_FORMAT

_REVISION_ID_PATTERN = re.compile(rf"^{re.escape(REVISION_ID_PREFIX)}(\d+)$")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnnotationSession:
    """Id counters and clock for one annotation session.

    Comment ids are max(existing numeric ids, ids issued by this session) + 1.
    Revision ids are REVISION_ID_PREFIX followed by a counter; the counter can
    be seeded from revision ids already present in the document so a second
    run over the same file does not reuse an id.

    Args:
        clock: Callable returning the current time (UTC); injectable for tests

    Example:
        >>> session = AnnotationSession()
        >>> session.next_comment_id(["1", "3", "4"])
        '5'
        >>> session.next_revision_id()
        'rev_1'
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or _utc_now
        self._lock = threading.Lock()
        self._comment_high_water = 0
        self._revision_counter = 0

    def next_comment_id(self, existing_ids: Iterable[str] = ()) -> str:
        """Allocate the next comment id.

        Args:
            existing_ids: w:id values already present in the comments part;
                non-numeric ids are ignored

        Returns:
            The new id as a decimal string
        """
        highest = 0
        for value in existing_ids:
            try:
                highest = max(highest, int(value))
            except (TypeError, ValueError):
                continue
        with self._lock:
            self._comment_high_water = max(self._comment_high_water, highest) + 1
            return str(self._comment_high_water)

    def next_revision_id(self) -> str:
        """Allocate the next revision id (shared by a w:del / w:ins pair)."""
        with self._lock:
            self._revision_counter += 1
            return f"{REVISION_ID_PREFIX}{self._revision_counter}"

    def seed_revision_ids(self, existing_ids: Iterable[str]) -> None:
        """Advance the revision counter past every existing prefixed id."""
        highest = 0
        for value in existing_ids:
            match = _REVISION_ID_PATTERN.match(value or "")
            if match:
                highest = max(highest, int(match.group(1)))
        with self._lock:
            self._revision_counter = max(self._revision_counter, highest)

    def now(self) -> datetime:
        return self._clock()

    def timestamp(self) -> str:
        """Current time formatted for w:date attributes."""
        return self.now().strftime(TIMESTAMP_FORMAT)
