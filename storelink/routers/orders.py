from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storelink.core.errors import StoreLinkError
from storelink.dependencies import get_actor, get_db
from storelink.routers.errors import http_error
from storelink.schemas.order import OrderCreate, OrderRead, TimeRange
from storelink.services import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=List[OrderRead])
def list_orders(
    store_id: Optional[str] = None,
    q: Optional[str] = None,
    time_range: TimeRange = "ALL",
    db: Session = Depends(get_db),
):
    return order_service.list_orders(db, store_id=store_id, query=q, time_range=time_range)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        return order_service.get_order(db, order_id)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=OrderRead, status_code=201)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    try:
        return order_service.create_order(db, payload, actor)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("/{order_id}/label", response_model=OrderRead)
def print_label(
    order_id: str,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    try:
        return order_service.print_label(db, order_id, actor)
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("/{order_id}/fulfill", response_model=OrderRead)
async def fulfill_order(
    order_id: str,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    try:
        return await order_service.fulfill_to_store(db, order_id, actor)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
