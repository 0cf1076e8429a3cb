"""
Overlap detection between availability windows of one provider.
"""

from typing import Iterable, List, Optional, Protocol

from .models import AvailabilityWindow
from .time_utils import intervals_overlap, to_minutes


class WindowCandidate(Protocol):
    """Anything carrying a weekday and a time range."""
    day_of_week: int
    start_time: str
    end_time: str


def find_overlapping_windows(
    existing_windows: Iterable[AvailabilityWindow],
    candidate: WindowCandidate,
    exclude_id: Optional[str] = None,
) -> List[AvailabilityWindow]:
    """
    Return the active windows on the candidate's day whose range intersects it.

    Ranges are half-open, so a window ending at 12:00 and one starting at
    12:00 are adjacent, not overlapping. ``exclude_id`` lets an updated
    window skip itself.
    """
    candidate_start = to_minutes(candidate.start_time)
    candidate_end = to_minutes(candidate.end_time)

    return [
        window
        for window in existing_windows
        if window.day_of_week == candidate.day_of_week
        and window.active
        and (exclude_id is None or window.id != exclude_id)
        and intervals_overlap(
            candidate_start, candidate_end, window.start_minutes, window.end_minutes
        )
    ]


def has_overlap(
    existing_windows: Iterable[AvailabilityWindow],
    candidate: WindowCandidate,
    exclude_id: Optional[str] = None,
) -> bool:
    """Check if the candidate conflicts with any existing active window."""
    return bool(find_overlapping_windows(existing_windows, candidate, exclude_id))
