from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from storelink.config import Settings, get_settings
from storelink.core.constants import DEFAULT_DASHBOARD_PATH
from storelink.core.logging import setup_logging
from storelink.database import Base, SessionLocal, engine
from storelink.models import import_all_models
from storelink.routers import (
    content_router,
    dashboard_router,
    health_router,
    mappings_router,
    orders_router,
    products_router,
    stores_router,
)
from storelink.services.seed_service import seed_database

setup_logging()
settings: Settings = get_settings()

import_all_models()
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(stores_router)
app.include_router(products_router)
app.include_router(mappings_router)
app.include_router(orders_router)
app.include_router(dashboard_router)
app.include_router(content_router)


@app.get("/")
def root():
    return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=302)


__all__ = ["app", "root"]
