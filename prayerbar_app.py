#!/usr/bin/env python3
"""
Prayer Bar
Status-bar module printing one JSON line for Waybar-style bars:
  - a fixed icon as the bar text
  - a tooltip with the Hijri date, the current prayer, a countdown to the
    next prayer and the full daily schedule
  - optional Arabic labels and 12-hour times
  - optional desktop reminders before each prayer
Timings come from the Aladhan API and are cached per city for three hours.
"""

import argparse
import json
import logging
import sys
from functools import partial

from prayerbar.cache import CacheStore, load_payload
from prayerbar.clock import local_now
from prayerbar.config import clear_defaults, load_defaults, resolve_settings, save_defaults
from prayerbar.errors import ConfigError, PrayerBarError
from prayerbar.formatting import RenderOptions
from prayerbar.notifier import DEFAULT_NOTIFY_MINUTES, check_notifications, state_path
from prayerbar.prayer_api import fetch_prayer_times
from prayerbar.render import build_output

LOGGER = logging.getLogger("prayerbar")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prayer times status-bar module")
    parser.add_argument("--city", help="Specify a city")
    parser.add_argument("--country", help="Specify a country")
    parser.add_argument(
        "--method",
        help="Specify a calculation method (see https://aladhan.com/calculation-methods)",
    )
    parser.add_argument("--ar", action="store_true", help="Display calendar in Arabic format")
    parser.add_argument(
        "--am-pm", "--am_pm", dest="am_pm", action="store_true",
        help="Display time in 12-hour AM/PM format",
    )
    parser.add_argument("--audio", help="Specify a custom notification audio file")
    parser.add_argument(
        "--notify", type=int, metavar="MINUTES",
        help=f"Notify before prayer in minutes (default: {DEFAULT_NOTIFY_MINUTES})",
    )
    parser.add_argument("--tz", help="IANA time zone to use instead of the local one")
    parser.add_argument("--cache-dir", help="Directory for cached timings (default: system temp dir)")
    parser.add_argument("--save", action="store_true", help="Save city, country and method as defaults")
    parser.add_argument("--forget", action="store_true", help="Remove saved defaults and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def send_reminders(current, upcoming, **kwargs) -> None:
    """Run the reminder check; its failures are logged, never raised."""
    try:
        check_notifications(current, upcoming, **kwargs)
    except Exception as exc:
        LOGGER.warning("Reminder check failed: %s", exc)
        LOGGER.debug("Reminder failure details", exc_info=True)


def run(args) -> int:
    settings = resolve_settings(args.city, args.country, args.method, load_defaults())
    if args.save:
        try:
            save_defaults(settings)
        except OSError as exc:
            LOGGER.warning("Unable to save defaults: %s", exc)

    now = local_now(args.tz)
    today = now.date()
    options = RenderOptions(use_arabic=args.ar, use_12_hour=args.am_pm)
    store = CacheStore(args.cache_dir)

    fetch = partial(fetch_prayer_times, settings.city, settings.country, settings.method, today)
    get_payload = partial(load_payload, store, settings.city, fetch, today=today)

    on_resolved = None
    if args.notify is not None or args.audio:
        on_resolved = partial(
            send_reminders,
            now=now,
            state_file=state_path(settings.city),
            minutes=DEFAULT_NOTIFY_MINUTES if args.notify is None else args.notify,
            use_arabic=args.ar,
            audio=args.audio,
        )

    record = build_output(get_payload, settings.city, options, now, on_resolved=on_resolved)
    print(json.dumps(record.as_dict(), ensure_ascii=False))
    return 0


def main(argv=None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.forget:
        clear_defaults()
        return 0

    try:
        return run(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except PrayerBarError as exc:
        LOGGER.debug("Run aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
