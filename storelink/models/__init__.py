import importlib

from storelink.models.mapping import StoreMapping, StoreVariantMapping
from storelink.models.order import Order, OrderHistory, OrderItem
from storelink.models.product import Product, ProductVariant
from storelink.models.store import Store


def import_all_models() -> None:
    for module_name in (
        "storelink.models.mapping",
        "storelink.models.order",
        "storelink.models.product",
        "storelink.models.store",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Order",
    "OrderHistory",
    "OrderItem",
    "Product",
    "ProductVariant",
    "Store",
    "StoreMapping",
    "StoreVariantMapping",
    "import_all_models",
]
