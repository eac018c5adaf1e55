from storelink.routers.content import router as content_router
from storelink.routers.dashboard import router as dashboard_router
from storelink.routers.health import router as health_router
from storelink.routers.mappings import router as mappings_router
from storelink.routers.orders import router as orders_router
from storelink.routers.products import router as products_router
from storelink.routers.stores import router as stores_router

__all__ = [
    "content_router",
    "dashboard_router",
    "health_router",
    "mappings_router",
    "orders_router",
    "products_router",
    "stores_router",
]
