"""
Human-readable rendering of nanosecond durations.

Output follows the familiar "850ns", "12.5µs", "3.204117ms", "1m30s" style:
sub-second values use the largest unit below one second with trailing zeros
trimmed, longer values are split into hours, minutes and seconds.
"""

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if frac == 0:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def format_duration(nanoseconds) -> str:
    """
    Format a duration given in nanoseconds.

    Floats are truncated to whole nanoseconds first.

    Example:
        >>> format_duration(1_234_567)
        '1.234567ms'
        >>> format_duration(90 * SECOND)
        '1m30s'
    """
    value = int(nanoseconds)
    if value == 0:
        return "0s"

    sign = "-" if value < 0 else ""
    value = abs(value)

    if value < MICROSECOND:
        return f"{sign}{value}ns"
    if value < MILLISECOND:
        return f"{sign}{_with_fraction(value, MICROSECOND)}µs"
    if value < SECOND:
        return f"{sign}{_with_fraction(value, MILLISECOND)}ms"

    hours, rest = divmod(value, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    seconds = f"{_with_fraction(rest, SECOND)}s"

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"
