import unittest
from datetime import date, datetime, timedelta
from types import SimpleNamespace

from storelink.core.ship_by import matches_time_range, ship_by_bucket, ship_by_urgency

TODAY = date(2024, 6, 12)


class ShipByBucketTest(unittest.TestCase):
    def test_due_today(self):
        self.assertEqual(ship_by_bucket(TODAY, "PAID", TODAY), "TODAY")

    def test_due_tomorrow(self):
        self.assertEqual(ship_by_bucket(TODAY + timedelta(days=1), "PENDING", TODAY), "TOMORROW")

    def test_overdue_open_order_is_delayed(self):
        self.assertEqual(ship_by_bucket(TODAY - timedelta(days=1), "PAID", TODAY), "DELAYED")

    def test_closed_orders_are_never_delayed(self):
        yesterday = TODAY - timedelta(days=1)
        self.assertIsNone(ship_by_bucket(yesterday, "SHIPPED", TODAY))
        self.assertIsNone(ship_by_bucket(yesterday, "CANCELLED", TODAY))

    def test_missing_or_far_ship_by(self):
        self.assertIsNone(ship_by_bucket(None, "PAID", TODAY))
        self.assertIsNone(ship_by_bucket(TODAY + timedelta(days=5), "PAID", TODAY))

    def test_iso_string_is_accepted(self):
        self.assertEqual(ship_by_bucket("2024-06-12", "PAID", TODAY), "TODAY")

    def test_urgency(self):
        self.assertEqual(ship_by_urgency(TODAY - timedelta(days=2), TODAY), "OVERDUE")
        self.assertEqual(ship_by_urgency(TODAY + timedelta(days=1), TODAY), "URGENT")
        self.assertEqual(ship_by_urgency(TODAY + timedelta(days=4), TODAY), "SCHEDULED")
        self.assertEqual(ship_by_urgency(None, TODAY), "NONE")


class TimeRangeTest(unittest.TestCase):
    def _order(self, days_ago, ship_by=None, status="PAID"):
        return SimpleNamespace(date=TODAY - timedelta(days=days_ago), ship_by=ship_by, status=status)

    def test_rolling_windows_include_today(self):
        self.assertTrue(matches_time_range(self._order(0), "30D", TODAY))
        self.assertTrue(matches_time_range(self._order(30), "30D", TODAY))
        self.assertFalse(matches_time_range(self._order(31), "30D", TODAY))
        self.assertTrue(matches_time_range(self._order(200), "365D", TODAY))

    def test_bucket_ranges(self):
        order = self._order(2, ship_by=TODAY - timedelta(days=1))
        self.assertTrue(matches_time_range(order, "DELAYED", TODAY))
        self.assertFalse(matches_time_range(order, "TODAY", TODAY))
        self.assertTrue(matches_time_range(order, "ALL", TODAY))

    def test_unknown_range_raises(self):
        with self.assertRaises(ValueError):
            matches_time_range(self._order(0), "7D", TODAY)

    def test_datetime_order_date(self):
        order = SimpleNamespace(date=datetime(2024, 6, 1, 12, 0), ship_by=None, status="PAID")
        self.assertTrue(matches_time_range(order, "30D", TODAY))


if __name__ == "__main__":
    unittest.main()
