import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from chrono_tools import zones
from chrono_tools.errors import InvalidTimezoneError


class TestResolveZone(unittest.TestCase):
    def test_known_zone(self):
        self.assertEqual(zones.zone_name(zones.resolve_zone(" Europe/Zurich ")), "Europe/Zurich")

    def test_unknown_and_empty(self):
        for name in ("Mars/Olympus", "", "   ", "../etc/passwd"):
            with self.assertRaises(InvalidTimezoneError):
                zones.resolve_zone(name)

    def test_error_names_the_zone(self):
        with self.assertRaises(InvalidTimezoneError) as ctx:
            zones.resolve_zone("Mars/Olympus")
        self.assertEqual(ctx.exception.timezone, "Mars/Olympus")
        self.assertTrue(str(ctx.exception).startswith("invalid timezone: 'Mars/Olympus'"))


class TestCatalog(unittest.TestCase):
    def test_popular_zones_resolve(self):
        self.assertEqual(zones.POPULAR_TIMEZONES[0], "UTC")
        self.assertEqual(len(zones.POPULAR_TIMEZONES), 25)
        for name in zones.POPULAR_TIMEZONES:
            zones.resolve_zone(name)

    def test_catalog_sorted(self):
        catalog = zones.all_timezone_ids()
        self.assertEqual(catalog, sorted(catalog))
        self.assertIn("Asia/Tokyo", catalog)

    def test_format_offset(self):
        self.assertEqual(zones.format_offset(0), "+00:00")
        self.assertEqual(zones.format_offset(9 * 3600), "+09:00")
        self.assertEqual(zones.format_offset(-(3 * 3600 + 1800)), "-03:30")
        self.assertEqual(zones.format_offset(5 * 3600 + 2700), "+05:45")


class TestDetectSystemTimezone(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.missing = str(Path(self.tmp.name) / "missing")

    def test_tz_environment_wins(self):
        with mock.patch.dict(os.environ, {"TZ": ":Asia/Tokyo"}):
            self.assertEqual(zones.detect_system_timezone(), "Asia/Tokyo")

    def test_timezone_file(self):
        path = Path(self.tmp.name) / "timezone"
        path.write_text("Europe/Zurich\n", encoding="utf-8")
        with mock.patch.dict(os.environ, {"TZ": ""}), \
                mock.patch.object(zones, "_TIMEZONE_FILES", (self.missing, str(path))):
            self.assertEqual(zones.detect_system_timezone(), "Europe/Zurich")

    def test_key_value_timezone_file(self):
        path = Path(self.tmp.name) / "TIMEZONE"
        path.write_text('# host zone\nTZ="America/Chicago"\n', encoding="utf-8")
        with mock.patch.dict(os.environ, {"TZ": ""}), \
                mock.patch.object(zones, "_TIMEZONE_FILES", (str(path),)):
            self.assertEqual(zones.detect_system_timezone(), "America/Chicago")

    def test_falls_back_to_utc(self):
        with mock.patch.dict(os.environ, {"TZ": "Nowhere/Special"}), \
                mock.patch.object(zones, "_TIMEZONE_FILES", (self.missing,)), \
                mock.patch.object(zones, "_LOCALTIME_LINK", self.missing):
            self.assertEqual(zones.detect_system_timezone(), "UTC")


if __name__ == "__main__":
    unittest.main()
