from __future__ import annotations

import re
from typing import Any

_CLOCK_RE = re.compile(r"^(?:(\d+):)?(\d+):([0-5]\d)$")


def parse_duration(value: Any) -> int:
    """Parse a duration into whole seconds.

    Accepted forms:
    - "MM:SS" (minutes may exceed 59, e.g. "90:00")
    - "H:MM:SS"
    - an int, taken as seconds. PyYAML resolves an unquoted `10:00` to the
      base-60 integer 600, so this keeps both spellings equivalent.

    Args:
        value: Raw value from front matter or a step marker attribute.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the value is negative, empty or malformed.
    """

    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Duration must not be negative: {value!r}")
        return value

    text = str(value or "").strip()
    if not text:
        raise ValueError("Duration is empty")

    match = _CLOCK_RE.match(text)
    if not match:
        raise ValueError(f"Invalid duration {text!r} (expected MM:SS)")

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2))
    seconds = int(match.group(3))

    if match.group(1) is not None and minutes > 59:
        raise ValueError(f"Invalid duration {text!r} (minutes must be < 60 in H:MM:SS)")

    return hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS (minutes are not wrapped into hours)."""

    if seconds < 0:
        raise ValueError("seconds must be >= 0")
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
