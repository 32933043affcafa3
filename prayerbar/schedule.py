"""Parse a day's timings into a schedule and find the current/next prayer."""

import datetime
import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from prayerbar.errors import PayloadShapeError

LOGGER = logging.getLogger(__name__)


class Prayer(enum.Enum):
    """The seven prayers shown in the tooltip, in canonical order."""

    FAJR = ("Fajr", "الفجر")
    SUNRISE = ("Sunrise", "الشروق")
    DHUHR = ("Dhuhr", "الظهر")
    ASR = ("Asr", "العصر")
    MAGHRIB = ("Maghrib", "المغرب")
    ISHA = ("Isha", "العشاء")
    LAST_THIRD = ("Last Third of the Night", "الثلث الأخير من الليل")

    def __init__(self, english, arabic):
        self.english = english
        self.arabic = arabic

    def label(self, use_arabic: bool = False) -> str:
        return self.arabic if use_arabic else self.english

    @classmethod
    def lookup(cls, name: str) -> Optional["Prayer"]:
        """Return the prayer for a canonical name or API key, else None."""
        return _BY_KEY.get(name)


# Aladhan reports the last third of the night under this key.
_API_ALIASES = {Prayer.LAST_THIRD: ("Lastthird",)}

_BY_KEY = {prayer.english: prayer for prayer in Prayer}
for _prayer, _aliases in _API_ALIASES.items():
    for _alias in _aliases:
        _BY_KEY[_alias] = _prayer


@dataclass(frozen=True)
class PrayerEntry:
    prayer: Prayer
    time: datetime.datetime

    @property
    def name(self) -> str:
        return self.prayer.english


@dataclass(frozen=True)
class Countdown:
    hours: int
    minutes: int


def parse_clock_time(value) -> Optional[datetime.time]:
    """
    Read the leading 'HH:MM' of an API time string such as '05:12 (EET)'.
    Returns None when the value is not a readable time.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()[:5]
    try:
        hour, minute = map(int, text.split(":"))
        return datetime.time(hour, minute)
    except ValueError:
        return None


def extract_timings(payload) -> dict:
    """Return ``payload['data']['timings']`` or raise PayloadShapeError."""
    try:
        timings = payload["data"]["timings"]
    except (KeyError, TypeError) as exc:
        raise PayloadShapeError("Prayer timings not available") from exc
    if not isinstance(timings, dict):
        raise PayloadShapeError("Prayer timings not available")
    return timings


def _raw_time(timings: dict, prayer: Prayer):
    for key in (prayer.english,) + _API_ALIASES.get(prayer, ()):
        if key in timings:
            return timings[key]
    return None


def parse_schedule(payload, now: datetime.datetime) -> List[PrayerEntry]:
    """
    Build today's schedule from the payload, sorted by time.

    Entries take the calendar day and fixed offset of ``now``. Keys other
    than the seven canonical prayers are dropped, as are prayers whose time
    string is missing or unreadable.
    """
    timings = extract_timings(payload)
    day = now.date()
    entries = []
    for prayer in Prayer:
        raw = _raw_time(timings, prayer)
        if raw is None:
            continue
        clock_time = parse_clock_time(raw)
        if clock_time is None:
            LOGGER.debug("Skipping %s: unreadable time %r", prayer.english, raw)
            continue
        moment = datetime.datetime.combine(day, clock_time, tzinfo=now.tzinfo)
        entries.append(PrayerEntry(prayer, moment))
    # stable: equal times keep canonical order
    entries.sort(key=lambda entry: entry.time)
    return entries


def resolve(
    schedule: List[PrayerEntry], now: datetime.datetime
) -> Tuple[Optional[PrayerEntry], Optional[PrayerEntry]]:
    """
    Return (current, next) for a schedule sorted by time.

    ``current`` is the latest entry at or before ``now`` and ``next`` the
    earliest entry after it; either is None when no entry qualifies. When
    two entries share a time the one earlier in canonical order wins.
    """
    current = None
    upcoming = None
    for entry in schedule:
        moment = now.astimezone(entry.time.tzinfo)
        if entry.time <= moment:
            if current is None or entry.time > current.time:
                current = entry
        elif upcoming is None:
            upcoming = entry
    return current, upcoming


def countdown(entry: PrayerEntry, now: datetime.datetime) -> Countdown:
    """Whole hours and minutes left until ``entry``, floored at zero."""
    remaining = entry.time - now.astimezone(entry.time.tzinfo)
    seconds = max(0, int(remaining.total_seconds()))
    hours, rest = divmod(seconds, 3600)
    return Countdown(hours, rest // 60)
