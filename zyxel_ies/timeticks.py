"""Helpers for SNMP TimeTicks (hundredths of a second)."""

UNKNOWN_UPTIME = "unknown"


def ticks_to_time(ticks: int) -> str:
    """
    Renders TimeTicks the way net-snmp tools print them,
    e.g. "2 days, 03:04:05.06" or "12.50 seconds".
    """
    ticks = int(ticks)
    days, ticks = divmod(ticks, 24 * 60 * 60 * 100)
    hours, ticks = divmod(ticks, 60 * 60 * 100)
    minutes, ticks = divmod(ticks, 60 * 100)
    seconds, ticks = divmod(ticks, 100)

    if days:
        return f"{days} day{'' if days == 1 else 's'}, {hours:02d}:{minutes:02d}:{seconds:02d}.{ticks:02d}"
    if hours:
        return f"{hours} hour{'' if hours == 1 else 's'}, {minutes:02d}:{seconds:02d}.{ticks:02d}"
    if minutes:
        return f"{minutes} minute{'' if minutes == 1 else 's'}, {seconds:02d}.{ticks:02d}"
    return f"{seconds}.{ticks:02d} second{'' if seconds == 1 else 's'}"
