"""Saved default city/country/method and settings resolution."""

import json
import os
from dataclasses import dataclass

from prayerbar.errors import ConfigError

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".prayerbar")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

REQUIRED_KEYS = ("city", "country")


@dataclass(frozen=True)
class Settings:
    city: str
    country: str
    method: str = ""


def save_defaults(settings: Settings) -> None:
    """Save the settings as defaults for later runs."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    data = {"city": settings.city, "country": settings.country, "method": settings.method}
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_defaults() -> dict | None:
    """Load previously saved defaults, or return None."""
    if not os.path.isfile(CONFIG_FILE):
        return None
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    if isinstance(data, dict) and all(data.get(k) for k in REQUIRED_KEYS):
        return data
    return None


def clear_defaults() -> None:
    """Remove the saved defaults file."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)


def resolve_settings(
    city: str = None,
    country: str = None,
    method: str = None,
    saved: dict = None,
) -> Settings:
    """
    Merge command-line values over saved defaults.

    Raises ConfigError when no city or country is available from either.
    """
    saved = saved or {}
    city = city or saved.get("city")
    country = country or saved.get("country")
    if method is None:
        method = saved.get("method") or ""
    if not city or not country:
        raise ConfigError("Missing required arguments: --city and --country")
    return Settings(city=city, country=country, method=str(method))
