"""Errors raised while building the prayer bar output."""


class PrayerBarError(Exception):
    """Base class for fatal prayerbar errors."""


class ConfigError(PrayerBarError):
    """Required settings are missing or invalid."""


class TransportError(PrayerBarError):
    """The timings API could not be reached or returned an unusable body."""


class PayloadShapeError(PrayerBarError):
    """The payload carries no usable ``data.timings`` object."""


class CacheError(PrayerBarError):
    """The cache file could not be written."""
