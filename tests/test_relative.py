import unittest
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from dateutil import tz

from chrono_tools.relative import match_compound, match_short_unit, parse_elapsed

REFERENCE = datetime(2025, 8, 11, 12, 0, tzinfo=tz.UTC)
UTC = ZoneInfo("UTC")
NEW_YORK = ZoneInfo("America/New_York")


class TestElapsedDurations(unittest.TestCase):
    def test_go_style_durations(self):
        self.assertEqual(parse_elapsed("2h30m"), timedelta(hours=2, minutes=30))
        self.assertEqual(parse_elapsed("-5s"), timedelta(seconds=-5))
        self.assertEqual(parse_elapsed("1.5h"), timedelta(minutes=90))
        self.assertEqual(parse_elapsed("300ms"), timedelta(milliseconds=300))
        self.assertEqual(parse_elapsed("1m"), timedelta(minutes=1))
        self.assertEqual(parse_elapsed("0"), timedelta(0))

    def test_non_durations(self):
        for raw in ("14", "d", "1x", "5 s", "h2", "", "1M"):
            self.assertIsNone(parse_elapsed(raw), raw)


class TestShortUnitForm(unittest.TestCase):
    def test_minus_fourteen_days(self):
        parsed = match_short_unit("-14d", REFERENCE, UTC)
        self.assertEqual(parsed, datetime(2025, 7, 28, 12, 0, tzinfo=tz.UTC))

    def test_weeks(self):
        parsed = match_short_unit("2w", REFERENCE, UTC)
        self.assertEqual(parsed, REFERENCE + timedelta(days=14))

    def test_months_clamp_to_month_end(self):
        parsed = match_short_unit("1M", datetime(2024, 1, 31, 9, 0, tzinfo=tz.UTC), UTC)
        self.assertEqual(parsed, datetime(2024, 2, 29, 9, 0, tzinfo=tz.UTC))

    def test_years_from_leap_day(self):
        parsed = match_short_unit("-1y", datetime(2024, 2, 29, tzinfo=tz.UTC), UTC)
        self.assertEqual(parsed, datetime(2023, 2, 28, tzinfo=tz.UTC))

    def test_minutes_and_months_are_case_sensitive(self):
        self.assertEqual(match_short_unit("1m", REFERENCE, UTC), REFERENCE + timedelta(minutes=1))
        self.assertEqual(match_short_unit("1M", REFERENCE, UTC), datetime(2025, 9, 11, 12, 0, tzinfo=tz.UTC))

    def test_zero_durations_return_reference(self):
        for raw in ("0", "0d", "0s", "0y"):
            self.assertEqual(match_short_unit(raw, REFERENCE, UTC), REFERENCE, raw)

    def test_elapsed_amounts_are_absolute(self):
        parsed = match_short_unit("2h30m", REFERENCE, UTC)
        self.assertEqual(parsed - REFERENCE, timedelta(hours=2, minutes=30))

    def test_days_follow_wall_clock_across_dst(self):
        start = datetime(2025, 3, 8, 12, 0, tzinfo=NEW_YORK)
        by_day = match_short_unit("1d", start, NEW_YORK)
        by_hours = match_short_unit("24h", start, NEW_YORK)
        self.assertEqual((by_day.day, by_day.hour), (9, 12))
        self.assertEqual((by_hours.day, by_hours.hour), (9, 13))
        self.assertEqual(by_day.astimezone(tz.UTC) - start.astimezone(tz.UTC), timedelta(hours=23))

    def test_result_is_in_target_zone(self):
        parsed = match_short_unit("-14d", REFERENCE, NEW_YORK)
        self.assertEqual(parsed.tzinfo, NEW_YORK)
        self.assertEqual(parsed, datetime(2025, 7, 28, 12, 0, tzinfo=tz.UTC))

    def test_anchored_match_only(self):
        for raw in ("14", "abc 5d", "5 d", "5days", "in 5d", "-14d ago", ""):
            self.assertIsNone(match_short_unit(raw, REFERENCE, UTC), raw)


class TestCompoundForm(unittest.TestCase):
    def test_days_and_hours_ago(self):
        parsed = match_compound("3 days and 2 hours ago", REFERENCE, UTC)
        self.assertIsNotNone(parsed)
        expected = REFERENCE - timedelta(days=3, hours=2)
        self.assertLess(abs((parsed - expected).total_seconds()), 60)

    def test_word_numbers(self):
        parsed = match_compound("one week and three days ago", REFERENCE, UTC)
        self.assertIsNotNone(parsed)
        expected = REFERENCE - timedelta(days=10)
        self.assertLess(abs((parsed - expected).total_seconds()), 60)

    def test_malformed_half_fails_whole_expression(self):
        self.assertIsNone(match_compound("3 days and xyzzy ago", REFERENCE, UTC))
        self.assertIsNone(match_compound("xyzzy and 2 hours ago", REFERENCE, UTC))

    def test_requires_conjunction(self):
        self.assertIsNone(match_compound("3 days ago", REFERENCE, UTC))


if __name__ == "__main__":
    unittest.main()
