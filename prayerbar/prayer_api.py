"""Fetch the daily timings payload for a city from the Aladhan API."""

import datetime
import logging

import requests

from prayerbar.errors import TransportError

LOGGER = logging.getLogger(__name__)

ALADHAN_BASE = "https://api.aladhan.com/v1"

# Seconds before requests gives up on the connection or the read.
REQUEST_TIMEOUT = 10


def build_request(city: str, country: str, method: str = "", date: datetime.date = None) -> tuple:
    """
    Return the (url, params) pair for a timingsByCity lookup.

    The calculation method is passed through as given and left out entirely
    when empty so the API applies its own default.
    """
    if date is None:
        date = datetime.date.today()
    url = f"{ALADHAN_BASE}/timingsByCity/{date.strftime('%d-%m-%Y')}"
    params = {"city": city, "country": country}
    if method:
        params["method"] = method
    return url, params


def fetch_prayer_times(
    city: str,
    country: str,
    method: str = "",
    date: datetime.date = None,
    timeout: int = REQUEST_TIMEOUT,
) -> dict:
    """
    Fetch the raw timings payload for one city and day.

    The decoded body is returned untouched so it can be cached as-is.
    Raises TransportError on connection failure, a non-2xx status,
    an undecodable body or an API-level error code.
    """
    url, params = build_request(city, country, method, date)
    LOGGER.debug("Fetching %s with %s", url, params)
    try:
        resp = requests.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        body = resp.json()
    except requests.RequestException as exc:
        raise TransportError(f"Error connecting to API: {exc}") from exc
    except ValueError as exc:
        raise TransportError(f"Unable to parse response: {exc}") from exc

    if not isinstance(body, dict):
        raise TransportError("Unable to parse response: expected a JSON object")
    if body.get("code") != 200:
        raise TransportError(f"Aladhan API error: {body.get('status')}")
    return body
