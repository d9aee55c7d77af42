"""
Lap time parsing.

Ergast reports lap and qualifying times as ``"M:SS.mmm"`` (``"1:22.109"``) or
as bare ``"SS.mmm"``. Race fastest-lap fields occasionally carry seconds above
59, which are carried over into minutes.

Two modes are offered. Best-effort parsing (the default) reads any
non-numeric part as zero so one bad field never aborts the conversion of an
otherwise valid standing. Strict parsing raises instead.
"""

from datetime import time

import structlog

from f1history.core.exceptions import LapTimeParseError
from f1history.models.domain import MIDNIGHT

logger = structlog.get_logger()


def _read_unsigned(raw: str, part: str, strict: bool) -> int:
    # Missing parts count as zero in both modes.
    if not part:
        return 0
    if part.isdecimal():
        try:
            return int(part)
        except ValueError as e:
            # More digits than int() converts; far beyond any field's range.
            raise LapTimeParseError(raw, "too many digits") from e
    if strict:
        raise LapTimeParseError(raw, f"{part!r} is not an unsigned integer")
    return 0


def parse_lap_time(raw: str, strict: bool = False) -> time:
    """
    Parse a lap time string into a time of day.

    Args:
        raw: ``"M:SS.mmm"`` or ``"SS.mmm"``; missing parts count as zero
        strict: Raise on non-numeric parts instead of reading them as zero

    Returns:
        ``time(0, minutes, seconds, milliseconds)``

    Raises:
        LapTimeParseError: In strict mode for non-numeric parts, and in both
            modes when minutes exceed 59 or milliseconds exceed 999 after
            seconds overflow has been carried into minutes. Parts too long
            to convert to an integer are out of range in both modes too.
    """
    parts = raw.split(":")
    if len(parts) == 1:
        minutes_part, seconds_part = "0", parts[0]
    else:
        minutes_part, seconds_part = parts[0], parts[-1]

    sub_parts = seconds_part.split(".")
    whole_part = sub_parts[0]
    millis_part = sub_parts[1] if len(sub_parts) > 1 else ""

    minutes = _read_unsigned(raw, minutes_part, strict)
    seconds = _read_unsigned(raw, whole_part, strict)
    millis = _read_unsigned(raw, millis_part, strict)

    if seconds >= 60:
        minutes += seconds // 60
        seconds = seconds % 60

    if minutes > 59:
        raise LapTimeParseError(raw, f"{minutes} minutes is out of range")
    if millis > 999:
        raise LapTimeParseError(raw, f"{millis} milliseconds is out of range")

    return time(0, minutes, seconds, millis * 1000)


def lap_time_or_midnight(raw: str) -> time:
    """Best-effort parse that falls back to midnight for out-of-range values."""
    try:
        return parse_lap_time(raw)
    except LapTimeParseError as e:
        logger.debug("Unusable lap time, using midnight", raw=raw, reason=e.reason)
        return MIDNIGHT


def select_qualifying_time(q1_time: str, q2_time: str, q3_time: str) -> str:
    """Return the latest qualifying segment time that was actually set (Q3 > Q2 > Q1)."""
    if q3_time:
        return q3_time
    if q2_time:
        return q2_time
    return q1_time
