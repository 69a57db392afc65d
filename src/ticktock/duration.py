"""Duration parsing: ``number | str`` -> milliseconds.

Numbers are already milliseconds and pass through unchanged.  Strings that
are plain numbers ("250") are milliseconds too.  Anything else is a human
timespan handed to :func:`humanfriendly.parse_timespan`, which understands
"10 ms", "1 second", "1.5 minutes", "2h" and friends and answers in seconds.

Parse failures raise :class:`humanfriendly.InvalidTimespan` and are left to
propagate.

Examples:
    >>> parse_duration(100)
    100.0
    >>> parse_duration("10 ms")
    10.0
    >>> parse_duration("1 second")
    1000.0
"""

from __future__ import annotations

from humanfriendly import parse_timespan

Duration = float | int | str


def parse_duration(value: Duration) -> float:
    """Resolve ``value`` to a float number of milliseconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"Duration must be a number or string, not {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass
    return parse_timespan(text) * 1000.0


__all__ = ["Duration", "parse_duration"]
