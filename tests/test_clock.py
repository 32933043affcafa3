"""Tests for the clock module."""

import datetime
import unittest

import pytz

from prayerbar.clock import local_now, to_fixed_offset
from prayerbar.errors import ConfigError


class TestToFixedOffset(unittest.TestCase):
    def test_keeps_instant_and_offset(self):
        tz = pytz.timezone("Africa/Cairo")
        moment = tz.localize(datetime.datetime(2025, 1, 15, 13, 0))
        fixed = to_fixed_offset(moment)
        self.assertIsInstance(fixed.tzinfo, datetime.timezone)
        self.assertEqual(fixed.utcoffset(), datetime.timedelta(hours=2))
        self.assertEqual(fixed, moment)

    def test_rejects_naive(self):
        with self.assertRaises(ValueError):
            to_fixed_offset(datetime.datetime(2025, 1, 15, 13, 0))


class TestLocalNow(unittest.TestCase):
    def test_local_zone_has_fixed_offset(self):
        now = local_now()
        self.assertIsInstance(now.tzinfo, datetime.timezone)

    def test_named_zone(self):
        now = local_now("Asia/Jakarta")
        self.assertEqual(now.utcoffset(), datetime.timedelta(hours=7))

    def test_unknown_zone_raises(self):
        with self.assertRaises(ConfigError):
            local_now("Mars/Olympus_Mons")


if __name__ == "__main__":
    unittest.main()
