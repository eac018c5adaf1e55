from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storelink.core.errors import StoreLinkError
from storelink.dependencies import get_db
from storelink.routers.errors import http_error
from storelink.schemas.store import StoreCreate, StoreRead, StoreUpdate
from storelink.services import store_service

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.get("", response_model=List[StoreRead])
def list_stores(db: Session = Depends(get_db)):
    return store_service.list_stores(db)


@router.get("/{store_id}", response_model=StoreRead)
def get_store(store_id: str, db: Session = Depends(get_db)):
    try:
        return store_service.get_store(db, store_id)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=StoreRead, status_code=201)
def create_store(payload: StoreCreate, db: Session = Depends(get_db)):
    try:
        return store_service.create_store(db, payload)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.put("/{store_id}", response_model=StoreRead)
def update_store(store_id: str, payload: StoreUpdate, db: Session = Depends(get_db)):
    try:
        return store_service.update_store(db, store_id, payload)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
