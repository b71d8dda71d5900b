"""
durations.py

Pure duration parsing and short-form classification.

This module:
- Contains NO I/O
- Contains NO API calls
- Contains NO state
"""

from __future__ import annotations

from typing import Any

import isodate

from subscribarr import config
from subscribarr.logger import get_logger

logger = get_logger(__name__)


def parse_duration_seconds(iso_duration: Any) -> int:
    """
    Parse a YouTube ISO 8601 duration to whole seconds.

    Args:
        iso_duration: Duration string as returned by videos.list
            contentDetails.duration (e.g. "PT3M45S")

    Returns:
        Non-negative total seconds. Empty or malformed durations return 0,
        which classifies the video as short-form. Month and year components
        have no fixed length and are ignored.

    Examples:
        >>> parse_duration_seconds("PT1H2M3S")
        3723

        >>> parse_duration_seconds("PT45S")
        45

        >>> parse_duration_seconds("")
        0
    """
    if not iso_duration or not isinstance(iso_duration, str):
        return 0

    try:
        parsed = isodate.parse_duration(iso_duration.strip())
    except (isodate.ISO8601Error, ValueError, TypeError) as e:
        logger.warning(f"Failed to parse duration '{iso_duration}': {e}")
        return 0

    if isinstance(parsed, isodate.Duration):
        parsed = parsed.tdelta

    return max(int(parsed.total_seconds()), 0)


def is_short_form(
    duration_seconds: int, max_short_sec: int = config.SHORT_FORM_MAX_SEC
) -> bool:
    """
    Short-form content is anything at or below the threshold.

    Examples:
        >>> is_short_form(60)
        True

        >>> is_short_form(61)
        False
    """
    return duration_seconds <= max_short_sec
