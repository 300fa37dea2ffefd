"""Calendar time conversion for the kernel clock.

The conversion assumes every fourth year is a leap year, which holds for
1970 through 2099, and ignores time zones.
"""

from __future__ import annotations

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
YEAR = 365 * DAY

# Offsets of month starts within a leap year.
_MONTH_START = (
    0,
    DAY * 31,
    DAY * (31 + 29),
    DAY * (31 + 29 + 31),
    DAY * (31 + 29 + 31 + 30),
    DAY * (31 + 29 + 31 + 30 + 31),
    DAY * (31 + 29 + 31 + 30 + 31 + 30),
    DAY * (31 + 29 + 31 + 30 + 31 + 30 + 31),
    DAY * (31 + 29 + 31 + 30 + 31 + 30 + 31 + 31),
    DAY * (31 + 29 + 31 + 30 + 31 + 30 + 31 + 31 + 30),
    DAY * (31 + 29 + 31 + 30 + 31 + 30 + 31 + 31 + 30 + 31),
    DAY * (31 + 29 + 31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30),
)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def mktime(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    """Return seconds since 1970-01-01 00:00:00 for a UTC calendar time.

    ``year`` is the full year and ``month`` runs from 1 to 12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month {month} out of range 1..12")
    years = year - 1970
    mon = month - 1
    res = YEAR * years + DAY * _trunc_div(years + 1, 4)
    res += _MONTH_START[mon]
    if mon > 1 and (years + 2) % 4:
        res -= DAY
    res += DAY * (day - 1)
    res += HOUR * hour
    res += MINUTE * minute
    res += second
    return res


def bcd_to_bin(value: int) -> int:
    """Decode a packed binary-coded-decimal byte."""
    return (value & 15) + (value >> 4) * 10


def cmos_to_epoch(sec: int, minute: int, hour: int, mday: int, mon: int, year: int) -> int:
    """Convert raw BCD clock registers to seconds since the epoch.

    ``year`` is the two-digit year register; years before 70 are taken as 20xx.
    """
    tm_year = bcd_to_bin(year)
    if tm_year + 1900 < 1970:
        tm_year += 100
    return mktime(
        tm_year + 1900,
        bcd_to_bin(mon),
        bcd_to_bin(mday),
        bcd_to_bin(hour),
        bcd_to_bin(minute),
        bcd_to_bin(sec),
    )


def system_time(startup_time: int, ticks: int, hz: int) -> int:
    """Return the current time from the startup time and timer ticks."""
    if hz <= 0:
        raise ValueError("timer frequency must be positive")
    return startup_time + ticks // hz