"""Wall-clock source pinned to a fixed UTC offset."""

import datetime

import pytz

from prayerbar.errors import ConfigError


def to_fixed_offset(moment: datetime.datetime) -> datetime.datetime:
    """Swap an aware datetime's zone for the fixed offset it has right now."""
    offset = moment.utcoffset()
    if offset is None:
        raise ValueError("expected a timezone-aware datetime")
    return moment.replace(tzinfo=datetime.timezone(offset))


def local_now(tz_name: str = None) -> datetime.datetime:
    """
    Current time with a fixed offset.

    Uses the system local zone, or the IANA zone ``tz_name`` when given.
    Raises ConfigError for an unknown zone name.
    """
    if tz_name:
        try:
            tz = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError as exc:
            raise ConfigError(f"Unknown time zone: {tz_name}") from exc
        current = datetime.datetime.now(tz)
    else:
        current = datetime.datetime.now().astimezone()
    return to_fixed_offset(current)
