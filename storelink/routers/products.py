from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storelink.core.errors import StoreLinkError
from storelink.dependencies import get_db
from storelink.routers.errors import http_error
from storelink.schemas.product import ProductCreate, ProductRead, ProductUpdate
from storelink.services import product_service
from storelink.services.content_service import ContentService, get_content_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductRead])
def list_products(q: Optional[str] = None, db: Session = Depends(get_db)):
    return product_service.list_products(db, q)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return product_service.get_product(db, product_id)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    content: ContentService = Depends(get_content_service),
):
    try:
        return product_service.create_product(db, payload, content=content)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        return product_service.update_product(db, product_id, payload)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    confirm: bool = Query(False),
    db: Session = Depends(get_db),
):
    try:
        product_service.delete_product(db, product_id, confirm=confirm)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
