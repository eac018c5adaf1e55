from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


OrderStatus = Literal["PENDING", "PAID", "SHIPPED", "CANCELLED"]
TimeRange = Literal["ALL", "TODAY", "TOMORROW", "DELAYED", "30D", "90D", "180D", "365D"]


class OrderItemBase(BaseModel):
    product_id: Optional[str] = None
    sku: str
    name: str
    quantity: int = Field(default=1, ge=1)
    price: float = Field(default=0, ge=0)


class OrderItemCreate(OrderItemBase):
    pass


class OrderItemRead(OrderItemBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class AuditLogEntryRead(BaseModel):
    timestamp: datetime
    action: str
    user: str

    model_config = ConfigDict(from_attributes=True)


class OrderBase(BaseModel):
    external_id: str
    store_id: str
    customer: str
    customer_email: str = ""
    customer_address: str = ""
    ship_by: Optional[date] = None
    subtotal: float = 0
    tax: float = 0
    discount: float = 0
    total: float = 0
    status: OrderStatus = "PENDING"
    packing_type: str = "Standard Box"


class OrderCreate(OrderBase):
    id: Optional[str] = None
    date: Optional[datetime] = None
    items: List[OrderItemCreate] = Field(min_length=1)


class OrderRead(OrderBase):
    id: str
    date: datetime
    item_count: int
    tracking_number: Optional[str] = None
    fulfilled_on_source: bool = False
    fulfillment_state: str
    ship_by_bucket: Optional[str] = None
    ship_by_urgency: str
    items: List[OrderItemRead] = Field(default_factory=list)
    history: List[AuditLogEntryRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
