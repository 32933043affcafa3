"""Tests for the prayer_api module."""

import datetime
import unittest
from unittest.mock import MagicMock, patch

import requests

from prayerbar.errors import TransportError
from prayerbar.prayer_api import ALADHAN_BASE, build_request, fetch_prayer_times

MOCK_RESPONSE = {
    "code": 200,
    "status": "OK",
    "data": {
        "timings": {
            "Fajr": "04:30",
            "Sunrise": "05:55",
            "Dhuhr": "12:00",
            "Asr": "15:30",
            "Maghrib": "18:15",
            "Isha": "19:30",
            "Midnight": "00:00",
            "Imsak": "04:20",
        },
        "date": {
            "gregorian": {"date": "01-03-2025"},
            "hijri": {
                "day": "1",
                "weekday": {"en": "Al Sabt", "ar": "السبت"},
                "month": {"en": "Ramaḍān", "ar": "رَمَضان"},
                "year": "1446",
            },
        },
    },
}


def _mock_response(body):
    mock_resp = MagicMock()
    mock_resp.json.return_value = body
    mock_resp.raise_for_status = MagicMock()
    return mock_resp


class TestBuildRequest(unittest.TestCase):
    def test_url_carries_date(self):
        url, params = build_request("Cairo", "Egypt", "5", datetime.date(2025, 3, 1))
        self.assertEqual(url, f"{ALADHAN_BASE}/timingsByCity/01-03-2025")
        self.assertEqual(params, {"city": "Cairo", "country": "Egypt", "method": "5"})

    def test_empty_method_is_left_out(self):
        _, params = build_request("Cairo", "Egypt", "", datetime.date(2025, 3, 1))
        self.assertNotIn("method", params)


class TestFetchPrayerTimes(unittest.TestCase):
    @patch("prayerbar.prayer_api.requests.get")
    def test_returns_raw_payload(self, mock_get):
        mock_get.return_value = _mock_response(MOCK_RESPONSE)

        result = fetch_prayer_times("Cairo", "Egypt", "5", datetime.date(2025, 3, 1))

        self.assertEqual(result, MOCK_RESPONSE)
        self.assertEqual(result["data"]["timings"]["Imsak"], "04:20")
        args, kwargs = mock_get.call_args
        self.assertTrue(args[0].endswith("/timingsByCity/01-03-2025"))
        self.assertEqual(kwargs["params"]["city"], "Cairo")
        self.assertEqual(kwargs["timeout"], 10)

    @patch("prayerbar.prayer_api.requests.get")
    def test_raises_on_api_error(self, mock_get):
        mock_get.return_value = _mock_response({"code": 400, "status": "Bad Request"})

        with self.assertRaises(TransportError):
            fetch_prayer_times("Nowhere", "XX")

    @patch("prayerbar.prayer_api.requests.get")
    def test_raises_on_http_error(self, mock_get):
        mock_resp = _mock_response({})
        mock_resp.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_get.return_value = mock_resp

        with self.assertRaises(TransportError):
            fetch_prayer_times("Cairo", "Egypt")

    @patch("prayerbar.prayer_api.requests.get")
    def test_raises_on_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Network error")

        with self.assertRaises(TransportError):
            fetch_prayer_times("Cairo", "Egypt")

    @patch("prayerbar.prayer_api.requests.get")
    def test_raises_on_undecodable_body(self, mock_get):
        mock_resp = _mock_response(None)
        mock_resp.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_resp

        with self.assertRaises(TransportError):
            fetch_prayer_times("Cairo", "Egypt")

    @patch("prayerbar.prayer_api.requests.get")
    def test_raises_on_non_object_body(self, mock_get):
        mock_get.return_value = _mock_response(["not", "an", "object"])

        with self.assertRaises(TransportError):
            fetch_prayer_times("Cairo", "Egypt")


if __name__ == "__main__":
    unittest.main()
