r"""Conversion of duration arguments to milliseconds."""

from __future__ import annotations

__all__ = ["to_millis"]

from datetime import timedelta


def to_millis(duration: float | timedelta) -> int:
    """Convert a duration to whole milliseconds.

    Numbers are interpreted as milliseconds and truncated towards zero;
    ``timedelta`` objects are converted exactly.

    Args:
        duration: A number of milliseconds or a ``timedelta``.

    Returns:
        The duration in milliseconds.

    Raises:
        TypeError: If ``duration`` is neither a number nor a ``timedelta``.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from retryer.utils.duration import to_millis
        >>> to_millis(250)
        250
        >>> to_millis(timedelta(seconds=2))
        2000
        >>> to_millis(1.9)
        1

        ```
    """
    if isinstance(duration, timedelta):
        return duration // timedelta(milliseconds=1)
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        msg = f"duration must be a number of milliseconds or a timedelta, got {duration!r}"
        raise TypeError(msg)
    return int(duration)
