"""Weekly rotation boundaries.

A week key is the ISO-8601 week-numbering year and week of an instant in UTC,
e.g. ``2026-W43``. Weeks start on Monday 00:00 UTC and week 1 is the week that
contains the year's first Thursday, so late-December and early-January dates
may belong to the neighbouring ISO year.
"""

from datetime import datetime, time, timedelta, timezone

WEEK_KEY_FORMAT = "{year}-W{week:02d}"


def as_utc(now: datetime) -> datetime:
    """Return ``now`` as an aware UTC datetime (naive values are taken as UTC)."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def week_key(now: datetime) -> str:
    iso_year, iso_week, _ = as_utc(now).isocalendar()
    return WEEK_KEY_FORMAT.format(year=iso_year, week=iso_week)


def next_week_start(now: datetime) -> datetime:
    """Upcoming Monday 00:00 UTC strictly after ``now``.

    Exactly Monday 00:00 yields the following Monday, a full 7-day window.
    """
    now = as_utc(now)
    days_ahead = 7 - now.weekday()
    monday = now.date() + timedelta(days=days_ahead)
    return datetime.combine(monday, time.min, tzinfo=timezone.utc)
