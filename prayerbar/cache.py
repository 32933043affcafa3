"""Per-city JSON cache of raw timings payloads."""

import datetime
import json
import logging
import os
import re
import tempfile
import time
from dataclasses import dataclass
from typing import Callable, Optional

from prayerbar.errors import CacheError, PayloadShapeError
from prayerbar.schedule import extract_timings

LOGGER = logging.getLogger(__name__)

# A cached payload older than this (seconds) is fetched again.
CACHE_TTL = 3 * 60 * 60

CACHE_DIR = tempfile.gettempdir()
CACHE_PREFIX = "prayerbar-"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class CacheRecord:
    payload: dict
    last_modified: float


def cache_key(city: str) -> str:
    """File-name-safe key for a city name."""
    return _UNSAFE_CHARS.sub("_", city.strip()) or "_"


class CacheStore:
    """Stores one payload per key as ``<cache_dir>/prayerbar-<key>.json``."""

    def __init__(self, cache_dir: str = None):
        self.cache_dir = os.path.expanduser(cache_dir or CACHE_DIR)

    def path_for(self, key: str) -> str:
        return os.path.join(self.cache_dir, f"{CACHE_PREFIX}{cache_key(key)}.json")

    def read(self, key: str) -> Optional[CacheRecord]:
        """Return the stored record, or None if it is missing or unreadable."""
        path = self.path_for(key)
        if not os.path.isfile(path):
            return None
        try:
            last_modified = os.path.getmtime(path)
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            LOGGER.debug("Ignoring unreadable cache file %s: %s", path, exc)
            return None
        if not isinstance(payload, dict):
            LOGGER.debug("Ignoring cache file %s: not a JSON object", path)
            return None
        return CacheRecord(payload, last_modified)

    def write(self, key: str, payload: dict) -> None:
        """Store the payload under key. Raises CacheError on failure."""
        path = self.path_for(key)
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as exc:
            raise CacheError(f"Unable to write cache file {path}: {exc}") from exc


def is_fresh(record: Optional[CacheRecord], now: float, ttl: float = CACHE_TTL) -> bool:
    """True when a record exists and is younger than ttl seconds at ``now``."""
    if record is None:
        return False
    return now - record.last_modified < ttl


def payload_date(payload) -> Optional[datetime.date]:
    """Gregorian day the payload was issued for, if it says."""
    try:
        raw = payload["data"]["date"]["gregorian"]["date"]
        return datetime.datetime.strptime(raw, "%d-%m-%Y").date()
    except (KeyError, TypeError, ValueError):
        return None


def _has_timings(payload) -> bool:
    try:
        extract_timings(payload)
    except PayloadShapeError:
        return False
    return True


def load_payload(
    store: CacheStore,
    key: str,
    fetch: Callable[[], dict],
    now: float = None,
    today: datetime.date = None,
    ttl: float = CACHE_TTL,
) -> dict:
    """
    Return a fresh cached payload for key, else fetch and cache a new one.

    A cached payload without timings, or issued for a day other than
    ``today``, is refetched even inside the ttl. A fetched payload without
    timings raises PayloadShapeError and is not cached. Failing to write
    the cache is logged and the fetched payload is still returned.
    """
    if now is None:
        now = time.time()
    record = store.read(key)
    if is_fresh(record, now, ttl) and _has_timings(record.payload):
        issued = payload_date(record.payload)
        if today is None or issued is None or issued == today:
            LOGGER.debug("Using cached payload for %s", key)
            return record.payload
        LOGGER.debug("Cached payload for %s is for %s, refetching", key, issued)

    payload = fetch()
    extract_timings(payload)
    try:
        store.write(key, payload)
    except CacheError as exc:
        LOGGER.warning("%s", exc)
    return payload
