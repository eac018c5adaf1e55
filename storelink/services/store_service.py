import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from storelink.core.errors import EntityNotFoundError, ValidationFailed
from storelink.core.identifiers import new_store_id
from storelink.models.store import Store

logger = logging.getLogger(__name__)


def validate_store(payload) -> dict:
    errors = {}
    if not (payload.name or "").strip():
        errors["name"] = "Store name is required"
    if not (payload.location or "").strip():
        errors["location"] = "Location/Region is required"
    if payload.ownership == "MARKETPLACE":
        credentials = payload.credentials
        if credentials is None or not (credentials.api_key or "").strip():
            errors["api_key"] = "API Key is required for marketplaces"
    return errors


def list_stores(db: Session) -> list[Store]:
    return list(db.execute(select(Store).order_by(Store.id)).scalars().all())


def get_store(db: Session, store_id: str) -> Store:
    store = db.get(Store, store_id)
    if store is None:
        raise EntityNotFoundError("Store", store_id)
    return store


def _apply_store_fields(store: Store, payload) -> None:
    store.name = payload.name.strip()
    store.location = payload.location.strip()
    store.type = payload.type
    store.ownership = payload.ownership
    credentials = payload.credentials
    if credentials is not None:
        store.api_key = credentials.api_key or None
        store.api_secret = credentials.api_secret or None
        store.endpoint = credentials.endpoint or None


def create_store(db: Session, payload) -> Store:
    errors = validate_store(payload)
    store_id = (payload.id or "").strip() or new_store_id()
    if db.get(Store, store_id) is not None:
        errors["id"] = f"Store {store_id} already exists"
    if errors:
        raise ValidationFailed(errors)

    store = Store(id=store_id)
    _apply_store_fields(store, payload)
    db.add(store)
    db.commit()
    logger.info("Store %s connected (%s, %s)", store.id, store.type, store.ownership)
    return store


def update_store(db: Session, store_id: str, payload) -> Store:
    store = get_store(db, store_id)
    errors = validate_store(payload)
    if (
        "api_key" in errors
        and payload.credentials is None
        and store.api_key
    ):
        # Keeping the stored key satisfies the marketplace requirement.
        errors.pop("api_key")
    if errors:
        raise ValidationFailed(errors)

    _apply_store_fields(store, payload)
    db.commit()
    logger.info("Store %s updated", store.id)
    return store


__all__ = ["create_store", "get_store", "list_stores", "update_store", "validate_store"]
