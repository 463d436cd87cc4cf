"""Display helpers for playback times."""

from __future__ import annotations

import math


def format_timestamp(seconds: float) -> str:
    """Format *seconds* as ``m:ss``.

    Example: ``format_timestamp(200.7)`` → ``"3:20"``
    """
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"
