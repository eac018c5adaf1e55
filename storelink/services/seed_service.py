"""Static mock data loaded into the in-memory database at startup."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from storelink.core.dates import local_date
from storelink.models.mapping import StoreMapping, StoreVariantMapping
from storelink.models.order import Order, OrderHistory, OrderItem
from storelink.models.product import Product, ProductVariant
from storelink.models.store import Store

logger = logging.getLogger(__name__)

SEED_ACTOR = "srikanth varma"

STORES = (
    {"id": "st_001", "name": "New York Flagship", "location": "Manhattan, NY", "type": "RETAIL", "ownership": "OWN"},
    {"id": "st_002", "name": "London Central", "location": "Westminster, UK", "type": "RETAIL", "ownership": "OWN"},
    {
        "id": "st_003",
        "name": "Amazon Global Fulfillment",
        "location": "Cloud",
        "type": "ONLINE",
        "ownership": "MARKETPLACE",
        "api_key": "amzn-demo-key-7d41",
        "endpoint": "https://sellingpartnerapi.example.com",
    },
    {"id": "st_004", "name": "Berlin Hub", "location": "Berlin, DE", "type": "WAREHOUSE", "ownership": "OWN"},
)


def _products():
    laptop = Product(
        id="prod_9k2m1",
        sku="EL-LPT-01",
        name="Zenith Pro Laptop",
        category="Electronics",
        description="High-performance laptop for professionals.",
        base_price=1299.99,
        status="ACTIVE",
        images=["https://images.storelink.example/prod_9k2m1/original.jpg"],
        created_at=datetime(2023, 10, 15, 10, 30, tzinfo=timezone.utc),
        mappings=[
            StoreMapping(store_id="st_001", spid="NY-ZEN-101", price=1299.99, base_stock=50, enabled=True),
            StoreMapping(store_id="st_003", spid="AMZ-B07X-LPT", price=1249.99, base_stock=500, enabled=True),
        ],
    )
    chair = Product(
        id="prod_5n3x9",
        sku="HM-CHR-42",
        name="ErgoSoft Office Chair",
        category="Home & Office",
        description="Ergonomic office chair with lumbar support.",
        base_price=299.50,
        status="ACTIVE",
        images=["https://images.storelink.example/prod_5n3x9/original.jpg"],
        created_at=datetime(2023, 11, 2, 14, 15, tzinfo=timezone.utc),
        mappings=[
            StoreMapping(store_id="st_001", spid="NY-ERG-500", price=310.00, base_stock=12, enabled=True),
            StoreMapping(store_id="st_004", spid="BER-ERG-42", price=290.00, base_stock=100, enabled=False),
        ],
    )

    tee_variants = [
        ProductVariant(id="var_tee_blm", position=0, sku="AP-TEE-BLAM", color="Black", size="M", price_adjustment=0),
        ProductVariant(id="var_tee_bll", position=1, sku="AP-TEE-BLAL", color="Black", size="L", price_adjustment=2),
        ProductVariant(id="var_tee_whm", position=2, sku="AP-TEE-WHIM", color="White", size="M", price_adjustment=0),
    ]
    tee = Product(
        id="prod_2t7q4",
        sku="AP-TEE",
        name="Urban Classic Tee",
        category="Apparel",
        description="Heavyweight cotton tee with a relaxed fit.",
        base_price=25.00,
        status="ACTIVE",
        images=["https://images.storelink.example/prod_2t7q4/original.jpg"],
        created_at=datetime(2024, 2, 20, 9, 0, tzinfo=timezone.utc),
        variants=tee_variants,
    )
    tee_stock = {
        "st_002": (40, 25, 30),
        "st_003": (300, 180, 220),
    }
    for store_id, stocks in tee_stock.items():
        code = store_id.split("_")[1]
        mapping = StoreMapping(store_id=store_id, spid=f"{code}-AP-TEE", price=25.00, base_stock=0, enabled=True)
        for variant, stock in zip(tee_variants, stocks):
            mapping.variant_mappings.append(
                StoreVariantMapping(
                    variant=variant,
                    spid=f"{code}-{variant.sku.split('-')[-1]}",
                    price=25.00 + variant.price_adjustment,
                    stock=stock,
                )
            )
        tee.mappings.append(mapping)

    draft = Product(
        id="prod_8b3d6",
        sku="BK-PY-101",
        name="Practical Python Handbook",
        category="Books",
        description="",
        base_price=39.00,
        status="DRAFT",
        images=["https://images.storelink.example/prod_8b3d6/original.jpg"],
        created_at=datetime(2024, 5, 4, 16, 45, tzinfo=timezone.utc),
    )
    return [laptop, chair, tee, draft]


def _order(now, *, id, store_id, days_ago, ship_in_days, status, items, events,
           tracking=None, fulfilled=False, customer="Alex Morgan"):
    placed = now - timedelta(days=days_ago)
    subtotal = round(sum(item["price"] * item["quantity"] for item in items), 2)
    tax = round(subtotal * 0.08, 2)
    order = Order(
        id=id,
        external_id=f"MP-{id.split('-')[-1]}-{store_id.split('_')[-1]}",
        store_id=store_id,
        customer=customer,
        customer_email=customer.lower().replace(" ", ".") + "@example.com",
        customer_address="221 Market St, San Francisco, CA",
        date=placed,
        ship_by=None if ship_in_days is None else local_date(now) + timedelta(days=ship_in_days),
        subtotal=subtotal,
        tax=tax,
        discount=0,
        total=round(subtotal + tax, 2),
        item_count=sum(item["quantity"] for item in items),
        status=status,
        packing_type="Standard Box",
        tracking_number=tracking,
        fulfilled_on_source=fulfilled,
        items=[
            OrderItem(
                position=position,
                product_id=item["product_id"],
                sku=item["sku"],
                name=item["name"],
                quantity=item["quantity"],
                price=item["price"],
            )
            for position, item in enumerate(items)
        ],
    )
    # Events are oldest first; history is kept newest first.
    for offset_hours, action in events:
        order.history.insert(
            0,
            OrderHistory(timestamp=placed + timedelta(hours=offset_hours), action=action, user=SEED_ACTOR),
        )
    return order


def _orders(now):
    laptop = {"product_id": "prod_9k2m1", "sku": "EL-LPT-01", "name": "Zenith Pro Laptop", "quantity": 1, "price": 1249.99}
    chair = {"product_id": "prod_5n3x9", "sku": "HM-CHR-42", "name": "ErgoSoft Office Chair", "quantity": 2, "price": 310.00}
    tee = {"product_id": "prod_2t7q4", "sku": "AP-TEE-BLAM", "name": "Urban Classic Tee", "quantity": 3, "price": 25.00}
    imported = (0, "Order Imported")
    return [
        _order(now, id="ORD-1001", store_id="st_003", days_ago=4, ship_in_days=-1, status="PAID",
               items=[laptop], events=[imported, (2, "Payment Captured")]),
        _order(now, id="ORD-1002", store_id="st_001", days_ago=1, ship_in_days=0, status="PENDING",
               items=[chair], events=[imported], customer="Priya Nair"),
        _order(now, id="ORD-1003", store_id="st_002", days_ago=2, ship_in_days=1, status="PAID",
               items=[tee], events=[imported, (1, "Payment Captured")], customer="Jamie Lee"),
        _order(now, id="ORD-1004", store_id="st_003", days_ago=6, ship_in_days=-3, status="SHIPPED",
               items=[tee, laptop], tracking="1ZK4M9Q2XA0921",
               events=[imported, (3, "Payment Captured"), (20, "Shipping Label Generated")]),
        _order(now, id="ORD-1005", store_id="st_001", days_ago=12, ship_in_days=-9, status="SHIPPED",
               items=[chair], tracking="1ZP7T3W8LC0921", fulfilled=True,
               events=[imported, (5, "Shipping Label Generated"), (6, "Fulfillment Sync: Posted to New York Flagship")]),
        _order(now, id="ORD-1006", store_id="st_002", days_ago=40, ship_in_days=-37, status="CANCELLED",
               items=[tee], events=[imported, (4, "Order Cancelled")]),
        _order(now, id="ORD-1007", store_id="st_003", days_ago=200, ship_in_days=None, status="PENDING",
               items=[laptop], events=[imported]),
    ]


def seed_database(db: Session, now=None) -> dict:
    """Insert the mock catalog once; skipped when stores already exist."""
    if db.execute(select(Store.id).limit(1)).first():
        logger.info("Seed skipped: stores already exist.")
        return {"stores": 0, "products": 0, "orders": 0}

    now = now or datetime.now(timezone.utc)
    stores = [Store(**values) for values in STORES]
    db.add_all(stores)
    db.flush()

    products = _products()
    db.add_all(products)
    db.flush()

    orders = _orders(now)
    db.add_all(orders)
    db.commit()

    counts = {"stores": len(stores), "products": len(products), "orders": len(orders)}
    logger.info("Seed data created: %s", counts)
    return counts


__all__ = ["STORES", "seed_database"]
