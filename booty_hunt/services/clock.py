"""Wall clock for services.

Services call ``clock.utc_now()`` through the module so tests can pin time.
The store keeps naive UTC timestamps.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_storage(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
