"""
Simulation Time Conversions
===========================

GPS time, Julian Date and simulation absolute time conversions.

Absolute time is the simulator's continuous time scale: seconds elapsed
since the J2000 epoch (2000-01-01 12:00:00, JD 2451545.0). GPS time is
carried as (rollover, week, seconds of week) and is converted through a
Julian Date. The GPS/UTC leap second offset is not applied.
"""

from datetime import datetime
from typing import Tuple


# Time system constants
SECONDS_PER_DAY = 86400.0
DAYS_PER_WEEK = 7
WEEKS_PER_ROLLOVER = 1024
DAYS_PER_ROLLOVER = DAYS_PER_WEEK * WEEKS_PER_ROLLOVER  # 7168

GPS_EPOCH_JD = 2444244.5  # 1980-01-06 00:00:00
J2000_EPOCH_JD = 2451545.0  # 2000-01-01 12:00:00


def gps_time_to_julian_date(rollover: int, week: int, seconds_of_week: float) -> float:
    """
    Convert GPS time to Julian Date.

    Args:
        rollover: Number of 1024-week rollovers since the GPS epoch
        week: GPS week within the current rollover
        seconds_of_week: Seconds since the start of the week

    Returns:
        Julian Date
    """
    days_since_week = seconds_of_week / SECONDS_PER_DAY
    days_since_rollover = days_since_week + DAYS_PER_WEEK * week
    days_since_epoch = DAYS_PER_ROLLOVER * rollover + days_since_rollover
    return days_since_epoch + GPS_EPOCH_JD


def julian_date_to_gps_time(jd: float) -> Tuple[int, int, float]:
    """
    Convert Julian Date to GPS time.

    Args:
        jd: Julian Date (not before the GPS epoch)

    Returns:
        Tuple of (rollover, week, seconds_of_week)
    """
    days_since_epoch = jd - GPS_EPOCH_JD
    rollover = int(days_since_epoch // DAYS_PER_ROLLOVER)
    days_since_rollover = days_since_epoch - DAYS_PER_ROLLOVER * rollover
    week = int(days_since_rollover // DAYS_PER_WEEK)
    seconds_of_week = (days_since_rollover - DAYS_PER_WEEK * week) * SECONDS_PER_DAY
    return rollover, week, seconds_of_week


def julian_date_to_abs_time(jd: float, epoch_jd: float = J2000_EPOCH_JD) -> float:
    """Convert Julian Date to absolute time [s since epoch_jd]."""
    return (jd - epoch_jd) * SECONDS_PER_DAY


def abs_time_to_julian_date(abs_time: float, epoch_jd: float = J2000_EPOCH_JD) -> float:
    """Convert absolute time [s since epoch_jd] to Julian Date."""
    return abs_time / SECONDS_PER_DAY + epoch_jd


def gps_time_to_abs_time(rollover: int,
                         week: int,
                         seconds_of_week: float,
                         epoch_jd: float = J2000_EPOCH_JD) -> float:
    """Convert GPS time straight to absolute time, through the Julian Date."""
    jd = gps_time_to_julian_date(rollover, week, seconds_of_week)
    return julian_date_to_abs_time(jd, epoch_jd)


def jd_to_datetime(jd: float) -> datetime:
    """
    Convert Julian Date to datetime.

    Args:
        jd: Julian Date

    Returns:
        datetime object (microsecond resolution, truncated)
    """
    Z = int(jd + 0.5)
    F = jd + 0.5 - Z

    if Z < 2299161:
        A = Z
    else:
        alpha = int((Z - 1867216.25) / 36524.25)
        A = Z + 1 + alpha - int(alpha / 4)

    B = A + 1524
    C = int((B - 122.1) / 365.25)
    D = int(365.25 * C)
    E = int((B - D) / 30.6001)

    day = B - D - int(30.6001 * E) + F

    if E < 14:
        month = E - 1
    else:
        month = E - 13

    if month > 2:
        year = C - 4716
    else:
        year = C - 4715

    day_int = int(day)
    frac = day - day_int
    hour = int(frac * 24)
    frac = frac * 24 - hour
    minute = int(frac * 60)
    frac = frac * 60 - minute
    second = int(frac * 60)
    microsecond = int((frac * 60 - second) * 1e6)

    return datetime(year, month, day_int, hour, minute, second, microsecond)
