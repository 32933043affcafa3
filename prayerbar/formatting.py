"""Time, prayer-name, countdown and Hijri-date rendering."""

import datetime
from dataclasses import dataclass

from prayerbar.schedule import Countdown, Prayer

PLACEHOLDER = "N/A"

ARABIC_MERIDIEM = {"AM": "ص", "PM": "م"}


@dataclass(frozen=True)
class RenderOptions:
    use_arabic: bool = False
    use_12_hour: bool = False


def format_time(moment: datetime.datetime, options: RenderOptions) -> str:
    """
    Render a time as 'HH:MM', or 'hh:mm AM' in 12-hour mode.

    In 12-hour Arabic mode the AM/PM marker is replaced by its Arabic
    letter afterwards.
    """
    if not options.use_12_hour:
        return moment.strftime("%H:%M")
    meridiem = "AM" if moment.hour < 12 else "PM"
    text = f"{moment.strftime('%I:%M')} {meridiem}"
    if options.use_arabic:
        for english, arabic in ARABIC_MERIDIEM.items():
            text = text.replace(english, arabic)
    return text


def translate_prayer_name(name, use_arabic: bool = False) -> str:
    """Display label for a prayer or prayer name; unknown names pass through."""
    prayer = name if isinstance(name, Prayer) else Prayer.lookup(name)
    if prayer is None:
        return name
    return prayer.label(use_arabic)


def format_countdown(remaining: Countdown, use_arabic: bool = False) -> str:
    if use_arabic:
        return f"بعد {remaining.hours} ساعة و {remaining.minutes} دقيقة"
    return f"in {remaining.hours}h {remaining.minutes}m"


def _dig(data, *path):
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _field(value) -> str:
    return value if isinstance(value, str) else PLACEHOLDER


def format_hijri_date(payload, language: str = "en") -> str:
    """
    Format the Hijri date carried in the payload as
    '<weekday> <day> <month> <year>' in ``language`` ('en' or 'ar').

    Each part falls back to 'N/A' on its own when missing.
    """
    hijri = _dig(payload, "data", "date", "hijri")
    parts = (
        _dig(hijri, "weekday", language),
        _dig(hijri, "day"),
        _dig(hijri, "month", language),
        _dig(hijri, "year"),
    )
    return " ".join(_field(part) for part in parts)
