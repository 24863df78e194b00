"""Time Span Formatting - Human-readable durations in the CI server's style."""

ONE_SECOND_MS = 1000
ONE_MINUTE_MS = 60 * ONE_SECOND_MS
ONE_HOUR_MS = 60 * ONE_MINUTE_MS
ONE_DAY_MS = 24 * ONE_HOUR_MS
ONE_YEAR_MS = 365 * ONE_DAY_MS


def _unit(value: int, name: str) -> str:
    if name == "day":
        return f"{value} {'day' if value == 1 else 'days'}"
    return f"{value} {name}"


def _two_units(big: int, big_name: str, small: int, small_name: str) -> str:
    # smaller unit only shown while the larger is a single digit
    text = _unit(big, big_name)
    if big < 10:
        text += " " + _unit(small, small_name)
    return text


def time_span_string(duration_ms: int) -> str:
    """
    Format a duration as a short human time span.

    Examples:
        time_span_string(3 * ONE_HOUR_MS + 5 * ONE_MINUTE_MS)  -> '3 hr 5 min'
        time_span_string(12_000)                               -> '12 sec'
        time_span_string(1_500)                                -> '1.5 sec'
        time_span_string(250)                                  -> '0.25 sec'
        time_span_string(40)                                   -> '40 ms'

    Args:
        duration_ms: Duration in milliseconds (negative values clamp to zero)

    Returns:
        Time span string
    """
    duration = max(int(duration_ms), 0)

    years, duration = divmod(duration, ONE_YEAR_MS)
    days, duration = divmod(duration, ONE_DAY_MS)
    hours, duration = divmod(duration, ONE_HOUR_MS)
    minutes, duration = divmod(duration, ONE_MINUTE_MS)
    seconds, millis = divmod(duration, ONE_SECOND_MS)

    if years > 0:
        return _two_units(years, "yr", days, "day")
    if days > 0:
        return _two_units(days, "day", hours, "hr")
    if hours > 0:
        return _two_units(hours, "hr", minutes, "min")
    if minutes > 0:
        return _two_units(minutes, "min", seconds, "sec")
    if seconds >= 10:
        return _unit(seconds, "sec")
    if seconds >= 1:
        return f"{seconds + millis / 1000:.1f} sec"
    if millis >= 100:
        return f"{millis / 1000:.2f} sec"
    return _unit(millis, "ms")
