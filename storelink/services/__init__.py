from storelink.services.content_service import ContentService, get_content_service
from storelink.services.dashboard_service import dashboard_summary
from storelink.services.mapping_service import save_mappings, toggle_mapping_enabled
from storelink.services.order_service import fulfill_to_store, print_label
from storelink.services.product_service import create_product, delete_product

__all__ = [
    "ContentService",
    "create_product",
    "dashboard_summary",
    "delete_product",
    "fulfill_to_store",
    "get_content_service",
    "print_label",
    "save_mappings",
    "toggle_mapping_enabled",
]
