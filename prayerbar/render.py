"""Assemble the status-bar record from a timings payload."""

import datetime
from dataclasses import dataclass
from typing import Callable, Optional

from prayerbar.formatting import (
    RenderOptions,
    format_countdown,
    format_hijri_date,
    format_time,
    translate_prayer_name,
)
from prayerbar.schedule import countdown, parse_schedule, resolve

DEFAULT_ICON = "󱠧"

NAME_WIDTH = 20


@dataclass(frozen=True)
class OutputRecord:
    text: str
    tooltip: str

    def as_dict(self) -> dict:
        return {"text": self.text, "tooltip": self.tooltip}


def tooltip_header(city: str, use_arabic: bool = False) -> str:
    if use_arabic:
        return f"مواقيت الصلاة في {city}"
    return f"Prayer Times in {city}"


def build_output(
    get_payload: Callable[[], dict],
    city: str,
    options: RenderOptions,
    now: datetime.datetime,
    on_resolved: Optional[Callable] = None,
) -> OutputRecord:
    """
    Build the icon text and tooltip for the payload returned by
    ``get_payload``.

    ``on_resolved(current, next)`` is called once the current and next
    prayers are known. Raises PayloadShapeError when the payload has no
    timings.
    """
    payload = get_payload()
    schedule = parse_schedule(payload, now)
    hijri_date = format_hijri_date(payload, "ar" if options.use_arabic else "en")

    current, upcoming = resolve(schedule, now)
    if on_resolved is not None:
        on_resolved(current, upcoming)

    status = []
    if current is not None:
        now_label = "الآن" if options.use_arabic else "Now"
        status.append(
            f"{now_label} {translate_prayer_name(current.prayer, options.use_arabic)} "
            f"{format_time(current.time, options)}"
        )
    if upcoming is not None:
        status.append(
            f"{translate_prayer_name(upcoming.prayer, options.use_arabic)} "
            f"{format_countdown(countdown(upcoming, now), options.use_arabic)}"
        )

    listing = [
        f"{translate_prayer_name(entry.prayer, options.use_arabic):<{NAME_WIDTH}} "
        f"{format_time(entry.time, options)}"
        for entry in schedule
    ]

    sections = [[hijri_date], [tooltip_header(city, options.use_arabic)], status, listing]
    tooltip = "\n\n".join("\n".join(lines) for lines in sections if lines)
    return OutputRecord(text=DEFAULT_ICON, tooltip=tooltip)
