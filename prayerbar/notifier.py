"""Desktop reminders and audio alerts for prayer times."""

import datetime
import json
import logging
import math
import os
import subprocess
import tempfile

try:
    from plyer import notification as plyer_notification
    _PLYER_AVAILABLE = True
except ImportError:
    _PLYER_AVAILABLE = False

from prayerbar.cache import cache_key
from prayerbar.formatting import translate_prayer_name
from prayerbar.schedule import Prayer

LOGGER = logging.getLogger(__name__)

APP_NAME = "Prayer Bar"
APP_ICON = ""  # Path to icon file; empty = default
AUDIO_PLAYER = "paplay"

DEFAULT_NOTIFY_MINUTES = 10

# A prayer counts as "just started" for this long after its time.
DUE_WINDOW = datetime.timedelta(minutes=5)

REMINDER_PRAYERS = frozenset(
    {Prayer.FAJR, Prayer.DHUHR, Prayer.ASR, Prayer.MAGHRIB, Prayer.ISHA}
)

STATE_DIR = tempfile.gettempdir()


def _send_plyer(title: str, message: str, timeout: int = 10) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    if not _PLYER_AVAILABLE:
        LOGGER.warning("plyer is not installed, dropping notification %r", title)
        return
    try:
        kwargs = dict(
            app_name=APP_NAME,
            title=title,
            message=message,
            timeout=timeout,
        )
        if APP_ICON:
            kwargs["app_icon"] = APP_ICON
        plyer_notification.notify(**kwargs)
    except Exception as exc:
        LOGGER.warning("Notification failed: %s", exc)


def play_audio(path: str) -> None:
    """Start playing an audio file without waiting for it to finish."""
    try:
        subprocess.Popen(
            [AUDIO_PLAYER, os.path.expanduser(path)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        LOGGER.warning("Unable to play %s with %s: %s", path, AUDIO_PLAYER, exc)


def notify_reminder(prayer_display_name: str, minutes: int, use_arabic: bool = False) -> None:
    """Send a notification N minutes before a prayer."""
    if use_arabic:
        title = f"🕌 {prayer_display_name} بعد {minutes} دقيقة"
        message = f"تبدأ صلاة {prayer_display_name} بعد {minutes} دقيقة."
    else:
        title = f"🕌 {prayer_display_name} in {minutes} minutes"
        message = f"{prayer_display_name} prayer starts in {minutes} minutes. Prepare for prayer."
    _send_plyer(title, message, timeout=15)


def notify_prayer_time(prayer_display_name: str, use_arabic: bool = False) -> None:
    """Send a notification when a prayer time arrives."""
    if use_arabic:
        title = f"🕌 حان وقت صلاة {prayer_display_name}"
        message = f"حان الآن وقت صلاة {prayer_display_name}. الله أكبر!"
    else:
        title = f"🕌 {prayer_display_name}: Time to Pray!"
        message = f"It is now time for {prayer_display_name} prayer. Allahu Akbar!"
    _send_plyer(title, message, timeout=30)


def state_path(city: str) -> str:
    """File remembering which notifications were already sent for a city."""
    return os.path.join(STATE_DIR, f"prayerbar-notified-{cache_key(city)}.json")


def load_sent(path: str, day: datetime.date) -> set:
    """Notification keys already sent on ``day``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return set()
    except (OSError, ValueError) as exc:
        LOGGER.debug("Ignoring unreadable notification state %s: %s", path, exc)
        return set()
    if not isinstance(data, dict) or data.get("date") != day.isoformat():
        return set()
    sent = data.get("sent", [])
    if not isinstance(sent, list) or not all(isinstance(key, str) for key in sent):
        LOGGER.debug("Ignoring malformed notification state %s", path)
        return set()
    return set(sent)


def save_sent(path: str, day: datetime.date, sent: set) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"date": day.isoformat(), "sent": sorted(sent)}, f)
    except OSError as exc:
        LOGGER.warning("Unable to save notification state %s: %s", path, exc)


def check_notifications(
    current,
    upcoming,
    now: datetime.datetime,
    state_file: str,
    minutes: int = DEFAULT_NOTIFY_MINUTES,
    use_arabic: bool = False,
    audio: str = None,
) -> list:
    """
    Send the reminders that are due and not yet sent today.

    A reminder fires when the next prayer is at most ``minutes`` away, and
    a "time to pray" alert when the current prayer began within DUE_WINDOW.
    Sunrise and the last third of the night never notify. Returns the keys
    of the notifications sent by this call.
    """
    due = []
    if upcoming is not None and upcoming.prayer in REMINDER_PRAYERS:
        remaining = upcoming.time - now
        if remaining <= datetime.timedelta(minutes=minutes):
            due.append((f"{upcoming.name}:reminder", upcoming, remaining))
    if current is not None and current.prayer in REMINDER_PRAYERS:
        if now - current.time < DUE_WINDOW:
            due.append((f"{current.name}:due", current, None))
    if not due:
        return []

    day = now.date()
    sent = load_sent(state_file, day)
    fired = []
    for key, entry, remaining in due:
        if key in sent:
            continue
        name = translate_prayer_name(entry.prayer, use_arabic)
        if remaining is None:
            notify_prayer_time(name, use_arabic)
        else:
            notify_reminder(name, math.ceil(remaining.total_seconds() / 60), use_arabic)
        sent.add(key)
        fired.append(key)

    if fired:
        save_sent(state_file, day, sent)
        if audio:
            play_audio(audio)
    return fired
