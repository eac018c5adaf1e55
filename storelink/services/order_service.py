import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from storelink.config import get_settings
from storelink.core.errors import EntityNotFoundError, PreconditionFailed, ValidationFailed
from storelink.core.fulfillment import (
    ORDER_IMPORTED_ACTION,
    can_fulfill_on_source,
    fulfillment_sync_action,
    label_action,
    status_after_label,
)
from storelink.core.identifiers import new_order_id, new_tracking_number
from storelink.core.inflight import inflight
from storelink.core.ship_by import matches_time_range
from storelink.models.order import Order, OrderHistory, OrderItem
from storelink.models.store import Store

logger = logging.getLogger(__name__)


def append_history(order: Order, action: str, actor: str, *, timestamp=None) -> OrderHistory:
    entry = OrderHistory(
        timestamp=timestamp or datetime.now(timezone.utc),
        action=action,
        user=actor,
    )
    order.history.insert(0, entry)
    return entry


def list_orders(db: Session, store_id=None, query=None, time_range="ALL", today=None) -> list[Order]:
    stmt = select(Order).order_by(Order.date.desc(), Order.id)
    if store_id:
        stmt = stmt.where(Order.store_id == store_id)
    orders = db.execute(stmt).scalars().all()

    query_text = (query or "").strip().lower()
    results = []
    for order in orders:
        if query_text and not (
            query_text in order.id.lower()
            or query_text in order.external_id.lower()
            or query_text in order.customer.lower()
        ):
            continue
        if not matches_time_range(order, time_range, today):
            continue
        results.append(order)
    return results


def get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise EntityNotFoundError("Order", order_id)
    return order


def create_order(db: Session, payload, actor: str) -> Order:
    errors = {}
    order_id = (payload.id or "").strip() or new_order_id()
    if db.get(Order, order_id) is not None:
        errors["id"] = f"Order {order_id} already exists"
    if db.get(Store, payload.store_id) is None:
        errors["store_id"] = f"Unknown store: {payload.store_id}"
    if not payload.customer.strip():
        errors["customer"] = "Customer is required"
    if errors:
        raise ValidationFailed(errors)

    order = Order(
        id=order_id,
        external_id=payload.external_id,
        store_id=payload.store_id,
        customer=payload.customer.strip(),
        customer_email=payload.customer_email,
        customer_address=payload.customer_address,
        date=payload.date or datetime.now(timezone.utc),
        ship_by=payload.ship_by,
        subtotal=payload.subtotal,
        tax=payload.tax,
        discount=payload.discount,
        total=payload.total,
        status=payload.status,
        packing_type=payload.packing_type,
        item_count=sum(item.quantity for item in payload.items),
        items=[
            OrderItem(
                position=position,
                product_id=item.product_id,
                sku=item.sku,
                name=item.name,
                quantity=item.quantity,
                price=item.price,
            )
            for position, item in enumerate(payload.items)
        ],
    )
    append_history(order, ORDER_IMPORTED_ACTION, actor)
    db.add(order)
    db.commit()
    logger.info(
        "Order %s imported from store %s",
        order.id,
        order.store_id,
        extra={
            "actor": actor,
            "order_id": order.id,
            "store_id": order.store_id,
            "action": ORDER_IMPORTED_ACTION,
        },
    )
    return order


def print_label(db: Session, order_id: str, actor: str) -> Order:
    """Generate or reprint the shipping label.

    The tracking number is kept on reprint; PENDING and PAID orders move to
    SHIPPED.
    """
    order = get_order(db, order_id)
    is_reprint = bool(order.tracking_number)
    if not is_reprint:
        order.tracking_number = new_tracking_number()
    order.status = status_after_label(order.status)
    append_history(order, label_action(is_reprint), actor)
    db.commit()
    logger.info(
        "Shipping label %s for order %s (%s)",
        "reprinted" if is_reprint else "generated",
        order.id,
        order.tracking_number,
        extra={"actor": actor, "order_id": order.id, "action": label_action(is_reprint)},
    )
    return order


async def fulfill_to_store(db: Session, order_id: str, actor: str, *, delay=None) -> Order:
    """Post tracking back to the originating store (simulated)."""
    order = get_order(db, order_id)
    if not can_fulfill_on_source(order.tracking_number, order.fulfilled_on_source):
        if not order.tracking_number:
            raise PreconditionFailed(f"Order {order_id} has no tracking number yet")
        raise PreconditionFailed(f"Order {order_id} is already fulfilled on its store")

    if delay is None:
        delay = get_settings().FULFILLMENT_SYNC_DELAY_SECONDS
    with inflight.claim(("fulfillment_sync", order_id)):
        # TODO: replace with the storefront order API call (timeout, retry, error reporting).
        await asyncio.sleep(delay)

    store = db.get(Store, order.store_id)
    order.fulfilled_on_source = True
    append_history(order, fulfillment_sync_action(store.name if store else None), actor)
    db.commit()
    logger.info(
        "Tracking %s for order %s posted to store %s",
        order.tracking_number,
        order.id,
        order.store_id,
        extra={
            "actor": actor,
            "order_id": order.id,
            "store_id": order.store_id,
            "action": "fulfillment_sync",
        },
    )
    return order


__all__ = [
    "append_history",
    "create_order",
    "fulfill_to_store",
    "get_order",
    "list_orders",
    "print_label",
]
