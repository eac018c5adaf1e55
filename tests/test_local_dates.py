import os
import time
import unittest
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from storelink.core.ship_by import ship_by_bucket
from storelink.database import Base, build_engine
from storelink.models import Order, Store
from storelink.schemas.order import OrderCreate, OrderItemCreate
from storelink.services.order_service import create_order


@contextmanager
def local_timezone(name):
    previous = os.environ.get("TZ")
    os.environ["TZ"] = name
    time.tzset()
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = previous
        time.tzset()


@unittest.skipUnless(hasattr(time, "tzset"), "needs time.tzset")
class LocalShipByTest(unittest.TestCase):
    def setUp(self):
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()
        self.db.add(Store(id="st_001", name="New York", location="NY", type="RETAIL", ownership="OWN"))
        self.db.commit()

    def tearDown(self):
        self.db.close()

    def _create(self, order_id, ship_by):
        payload = OrderCreate(
            id=order_id,
            external_id="EXT-" + order_id,
            store_id="st_001",
            customer="Alex Morgan",
            status="PAID",
            ship_by=ship_by,
            items=[OrderItemCreate(sku="EL-LPT-01", name="Laptop", quantity=1, price=10)],
        )
        create_order(self.db, payload, "importer")
        self.db.expire_all()
        return self.db.get(Order, order_id)

    def test_local_midnight_west_of_utc_is_due_today(self):
        with local_timezone("America/New_York"):
            today = date.today()
            midnight = datetime(today.year, today.month, today.day)
            self.assertEqual(ship_by_bucket(midnight, "PAID"), "TODAY")
            self.assertEqual(ship_by_bucket(today.isoformat(), "PAID"), "TODAY")

    def test_ship_by_round_trip_keeps_calendar_day(self):
        for name in ("America/New_York", "Asia/Tokyo"):
            with local_timezone(name):
                today = date.today()
                order = self._create("ORD-" + name.split("/")[1], today.isoformat())
                self.assertEqual(order.ship_by, today)
                self.assertEqual(order.ship_by_bucket, "TODAY")
                yesterday = self._create("ORD-Y-" + name.split("/")[1], today - timedelta(days=1))
                self.assertEqual(yesterday.ship_by_bucket, "DELAYED")

    def test_order_timestamps_load_as_aware_utc(self):
        with local_timezone("America/New_York"):
            placed = datetime(2024, 6, 12, 23, 30, tzinfo=timezone.utc)
            payload = OrderCreate(
                id="ORD-TS",
                external_id="EXT-TS",
                store_id="st_001",
                customer="Alex Morgan",
                date=placed,
                items=[OrderItemCreate(sku="EL-LPT-01", name="Laptop", quantity=1, price=10)],
            )
            create_order(self.db, payload, "importer")
            self.db.expire_all()
            order = self.db.get(Order, "ORD-TS")
            self.assertEqual(order.date, placed)
            self.assertEqual(order.date.tzinfo, timezone.utc)
            self.assertEqual(order.history[0].timestamp.tzinfo, timezone.utc)


if __name__ == "__main__":
    unittest.main()
