from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, Float, ForeignKey, Index, Integer, String, desc
from sqlalchemy.orm import relationship

from storelink.core import fulfillment as fulfillment_rules
from storelink.core import ship_by as ship_by_rules
from storelink.database.base import Base
from storelink.database.types import UTCDateTime


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    external_id = Column(String, nullable=False)
    store_id = Column(String, ForeignKey("stores.id"), nullable=False)

    customer = Column(String, nullable=False)
    customer_email = Column(String, nullable=False, default="")
    customer_address = Column(String, nullable=False, default="")

    date = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    # Calendar day, no time of day.
    ship_by = Column(Date)

    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)
    item_count = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="PENDING")
    packing_type = Column(String, nullable=False, default="Standard Box")
    tracking_number = Column(String)
    fulfilled_on_source = Column(Boolean, nullable=False, default=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
    )
    # Newest first; new entries are inserted at index 0.
    history = relationship(
        "OrderHistory",
        back_populates="order",
        order_by=lambda: [desc(OrderHistory.timestamp), desc(OrderHistory.id)],
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_orders_store", "store_id"),
        Index("idx_orders_external", "external_id"),
    )

    @property
    def fulfillment_state(self) -> str:
        return fulfillment_rules.fulfillment_state(self.tracking_number, self.fulfilled_on_source)

    @property
    def ship_by_bucket(self):
        return ship_by_rules.ship_by_bucket(self.ship_by, self.status)

    @property
    def ship_by_urgency(self) -> str:
        return ship_by_rules.ship_by_urgency(self.ship_by)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # No FK: orders outlive deleted catalog products.
    product_id = Column(String)
    sku = Column(String, nullable=False)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False, default=0)

    order = relationship("Order", back_populates="items")


class OrderHistory(Base):
    __tablename__ = "order_history"

    id = Column(Integer, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False)
    timestamp = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    action = Column(String, nullable=False)
    user = Column(String, nullable=False)

    order = relationship("Order", back_populates="history")


__all__ = ["Order", "OrderHistory", "OrderItem"]
