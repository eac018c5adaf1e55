from collections import Counter, OrderedDict

from sqlalchemy import select
from sqlalchemy.orm import Session

from storelink.core.constants import ORDER_STATUSES, ROLLING_WINDOWS
from storelink.core.ship_by import matches_time_range, ship_by_bucket
from storelink.models.order import Order
from storelink.models.product import Product
from storelink.models.store import Store


def _counted_mappings(product, include_disabled):
    for mapping in product.mappings:
        if include_disabled or mapping.enabled:
            yield mapping


def catalog_summary(products, stores, *, include_disabled=True) -> dict:
    """Catalog figures; disabled mappings count toward stock unless excluded."""
    stock_by_store = OrderedDict(
        (
            store.id,
            {
                "store_id": store.id,
                "name": store.name,
                "stock": 0,
                "mapped_products": 0,
                "enabled_mappings": 0,
            },
        )
        for store in stores
    )
    total_inventory = 0
    active_mappings = 0
    categories = Counter()

    for product in products:
        categories[product.category] += 1
        for mapping in product.mappings:
            if mapping.enabled:
                active_mappings += 1
        for mapping in _counted_mappings(product, include_disabled):
            total_inventory += mapping.stock
            row = stock_by_store.get(mapping.store_id)
            if row is None:
                continue
            row["stock"] += mapping.stock
            row["mapped_products"] += 1
            if mapping.enabled:
                row["enabled_mappings"] += 1

    return {
        "global_skus": len(products),
        "active_mappings": active_mappings,
        "total_inventory": total_inventory,
        "managed_stores": len(stores),
        "stock_by_store": list(stock_by_store.values()),
        "category_distribution": [
            {"name": name, "value": value}
            for name, value in sorted(categories.items(), key=lambda item: (-item[1], item[0]))
        ],
    }


def order_summary(orders, today=None) -> dict:
    by_status = {status: 0 for status in ORDER_STATUSES}
    alerts = {"delayed": 0, "due_today": 0, "due_tomorrow": 0}
    alert_keys = {"DELAYED": "delayed", "TODAY": "due_today", "TOMORROW": "due_tomorrow"}
    windows = {name: {"orders": 0, "revenue": 0.0} for name in ROLLING_WINDOWS}

    for order in orders:
        by_status[order.status] = by_status.get(order.status, 0) + 1
        bucket = ship_by_bucket(order.ship_by, order.status, today)
        if bucket is not None:
            alerts[alert_keys[bucket]] += 1
        for name in ROLLING_WINDOWS:
            if matches_time_range(order, name, today):
                windows[name]["orders"] += 1
                if order.status != "CANCELLED":
                    windows[name]["revenue"] = round(windows[name]["revenue"] + order.total, 2)

    return {
        "orders_by_status": by_status,
        "order_alerts": alerts,
        "order_windows": windows,
    }


def dashboard_summary(db: Session, today=None, include_disabled=True) -> dict:
    products = db.execute(select(Product)).scalars().all()
    stores = db.execute(select(Store).order_by(Store.id)).scalars().all()
    orders = db.execute(select(Order)).scalars().all()

    summary = catalog_summary(products, stores, include_disabled=include_disabled)
    summary.update(order_summary(orders, today))
    return summary


__all__ = ["catalog_summary", "dashboard_summary", "order_summary"]
