import unittest
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from storelink.core.errors import ActionInProgressError, PreconditionFailed, ValidationFailed
from storelink.core.fulfillment import LABEL_PRINTED_ACTION, LABEL_REPRINTED_ACTION, ORDER_IMPORTED_ACTION
from storelink.core.inflight import inflight
from storelink.database import Base, build_engine
from storelink.models import Order, Store
from storelink.schemas.order import OrderCreate, OrderItemCreate
from storelink.services.order_service import create_order, fulfill_to_store, list_orders, print_label


def _order_payload(**overrides):
    values = dict(
        id="ORD-1",
        external_id="AMZ-99",
        store_id="st_001",
        customer="Alex Morgan",
        status="PENDING",
        total=52.0,
        items=[
            OrderItemCreate(sku="AP-TEE-BLAM", name="Tee", quantity=2, price=25),
            OrderItemCreate(sku="AP-TEE-WHIM", name="Tee", quantity=1, price=2),
        ],
    )
    values.update(overrides)
    return OrderCreate(**values)


class OrderServiceTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()
        self.db.add(Store(id="st_001", name="New York Flagship", location="NY", type="RETAIL", ownership="OWN"))
        self.db.commit()
        self.order = create_order(self.db, _order_payload(), "importer")

    def tearDown(self):
        self.db.close()

    def test_create_records_import(self):
        self.assertEqual(self.order.item_count, 3)
        self.assertEqual(self.order.fulfillment_state, "NO_TRACKING")
        self.assertEqual([entry.action for entry in self.order.history], [ORDER_IMPORTED_ACTION])
        self.assertEqual(self.order.history[0].user, "importer")

    def test_create_rejects_unknown_store_and_duplicate_id(self):
        with self.assertRaises(ValidationFailed) as ctx:
            create_order(self.db, _order_payload(store_id="st_404"), "importer")
        self.assertEqual(set(ctx.exception.errors), {"id", "store_id"})

    def test_print_label_on_pending_order(self):
        order = print_label(self.db, "ORD-1", "packer")
        self.assertEqual(order.status, "SHIPPED")
        self.assertTrue(order.tracking_number.startswith("1Z"))
        self.assertEqual(len(order.history), 2)
        self.assertEqual(order.history[0].action, LABEL_PRINTED_ACTION)
        self.assertEqual(order.history[0].user, "packer")
        self.assertEqual(order.fulfillment_state, "LABEL_PRINTED")

    def test_reprint_keeps_tracking_number(self):
        tracking = print_label(self.db, "ORD-1", "packer").tracking_number
        order = print_label(self.db, "ORD-1", "packer")
        self.assertEqual(order.tracking_number, tracking)
        self.assertEqual(order.status, "SHIPPED")
        self.assertEqual(
            [entry.action for entry in order.history],
            [LABEL_REPRINTED_ACTION, LABEL_PRINTED_ACTION, ORDER_IMPORTED_ACTION],
        )

    def test_label_does_not_reopen_cancelled_order(self):
        create_order(self.db, _order_payload(id="ORD-2", status="CANCELLED"), "importer")
        order = print_label(self.db, "ORD-2", "packer")
        self.assertEqual(order.status, "CANCELLED")

    async def test_fulfill_requires_tracking_number(self):
        with self.assertRaises(PreconditionFailed):
            await fulfill_to_store(self.db, "ORD-1", "packer", delay=0)

    async def test_fulfill_posts_to_source_store_once(self):
        print_label(self.db, "ORD-1", "packer")
        order = await fulfill_to_store(self.db, "ORD-1", "packer", delay=0)
        self.assertTrue(order.fulfilled_on_source)
        self.assertEqual(order.fulfillment_state, "SOURCE_SYNCED")
        self.assertEqual(order.history[0].action, "Fulfillment Sync: Posted to New York Flagship")

        with self.assertRaises(PreconditionFailed):
            await fulfill_to_store(self.db, "ORD-1", "packer", delay=0)

    async def test_fulfill_while_pending_is_rejected(self):
        print_label(self.db, "ORD-1", "packer")
        with inflight.claim(("fulfillment_sync", "ORD-1")):
            with self.assertRaises(ActionInProgressError):
                await fulfill_to_store(self.db, "ORD-1", "packer", delay=0)
        self.assertFalse(self.db.get(Order, "ORD-1").fulfilled_on_source)


class ListOrdersTest(unittest.TestCase):
    def setUp(self):
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()
        self.db.add_all(
            [
                Store(id="st_001", name="A", location="NY", type="RETAIL", ownership="OWN"),
                Store(id="st_002", name="B", location="UK", type="RETAIL", ownership="OWN"),
            ]
        )
        self.db.commit()
        self.today = date(2024, 6, 12)
        noon = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)
        create_order(self.db, _order_payload(id="ORD-A", date=noon, ship_by=self.today), "x")
        create_order(
            self.db,
            _order_payload(id="ORD-B", store_id="st_002", customer="Jamie Lee", date=noon - timedelta(days=45)),
            "x",
        )

    def tearDown(self):
        self.db.close()

    def test_filters(self):
        def ids(orders):
            return [order.id for order in orders]

        self.assertEqual(ids(list_orders(self.db, today=self.today)), ["ORD-A", "ORD-B"])
        self.assertEqual(ids(list_orders(self.db, store_id="st_002", today=self.today)), ["ORD-B"])
        self.assertEqual(ids(list_orders(self.db, query="jamie", today=self.today)), ["ORD-B"])
        self.assertEqual(ids(list_orders(self.db, time_range="30D", today=self.today)), ["ORD-A"])
        self.assertEqual(ids(list_orders(self.db, time_range="TODAY", today=self.today)), ["ORD-A"])


if __name__ == "__main__":
    unittest.main()
