import json
import logging
import unittest

from sqlalchemy.orm import sessionmaker

from storelink.core.logging import ContextFormatter, JsonFormatter
from storelink.database import Base, build_engine
from storelink.models import Store
from storelink.schemas.order import OrderCreate, OrderItemCreate
from storelink.services.order_service import create_order, print_label


def _record(**extra):
    record = logging.LogRecord("storelink.test", logging.INFO, __file__, 1, "Label for %s", ("ORD-1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class FormatterTest(unittest.TestCase):
    def test_json_formatter_includes_context_fields(self):
        payload = json.loads(JsonFormatter().format(_record(actor="Jamie", order_id="ORD-1")))
        self.assertEqual(payload["message"], "Label for ORD-1")
        self.assertEqual(payload["actor"], "Jamie")
        self.assertEqual(payload["order_id"], "ORD-1")
        self.assertNotIn("product_id", payload)

    def test_context_formatter_appends_fields(self):
        line = ContextFormatter(fmt="%(message)s").format(_record(actor="Jamie", store_id="st_001"))
        self.assertEqual(line, "Label for ORD-1 [actor=Jamie store_id=st_001]")
        self.assertEqual(ContextFormatter(fmt="%(message)s").format(_record()), "Label for ORD-1")


class ServiceLogContextTest(unittest.TestCase):
    def test_label_log_carries_actor_and_order(self):
        engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=engine)
        db = sessionmaker(bind=engine, expire_on_commit=False)()
        db.add(Store(id="st_001", name="New York", location="NY", type="RETAIL", ownership="OWN"))
        db.commit()
        create_order(
            db,
            OrderCreate(
                id="ORD-1",
                external_id="EXT-1",
                store_id="st_001",
                customer="Alex Morgan",
                items=[OrderItemCreate(sku="EL-LPT-01", name="Laptop")],
            ),
            "importer",
        )

        with self.assertLogs("storelink.services.order_service", level="INFO") as captured:
            print_label(db, "ORD-1", "packer")
        record = captured.records[-1]
        self.assertEqual(record.actor, "packer")
        self.assertEqual(record.order_id, "ORD-1")
        self.assertEqual(record.action, "Shipping Label Generated")
        db.close()


if __name__ == "__main__":
    unittest.main()
