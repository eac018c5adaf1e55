from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storelink.config import get_settings
from storelink.core.dates import utc_now
from storelink.core.inflight import inflight
from storelink.dependencies import get_db
from storelink.models import Order, Product, Store
from storelink.services.content_service import ContentService, get_content_service

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    content: ContentService = Depends(get_content_service),
):
    """Liveness plus what the in-memory catalog currently holds."""
    settings = get_settings()
    counts = {
        name: db.execute(select(func.count()).select_from(model)).scalar_one()
        for name, model in (("stores", Store), ("products", Product), ("orders", Order))
    }
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": utc_now().isoformat(),
        "catalog": counts,
        "content_generation": "enabled" if content.enabled else "disabled",
        "pending_actions": inflight.pending_count(),
    }
