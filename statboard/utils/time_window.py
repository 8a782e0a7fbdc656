"""
Time window utilities for windowed stat queries.

All timestamps are integer milliseconds since the Unix epoch.
"""

import time
from typing import Tuple

from statboard.constants import WindowConstants


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def validate_window_days(window_days: int) -> int:
    """
    Check that a window length is a positive whole number of days.
    
    Raises:
        ValueError: If the window is not a positive integer
    """
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
        raise ValueError("window_days must be a positive integer")
    return window_days


def window_start_for(now: int, window_days: int) -> int:
    """
    Exclusive lower boundary of a window of window_days days ending at now.
    
    Windows longer than ALL_TIME are clamped to it; the boundary is already
    older than any timestamp and has to stay inside a signed BIGINT.
    """
    days = min(validate_window_days(window_days), WindowConstants.ALL_TIME)
    return now - days * WindowConstants.MILLIS_PER_DAY


def window_bounds(window_days: int, now: int) -> Tuple[int, int]:
    """
    Compute the (now, window_start) pair for a trailing window.
    
    An event at timestamp t is inside the window when window_start < t <= now.
    """
    return now, window_start_for(now, window_days)
