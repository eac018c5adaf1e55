from typing import Dict, List

from pydantic import BaseModel, Field


class StoreStock(BaseModel):
    store_id: str
    name: str
    stock: int
    mapped_products: int
    enabled_mappings: int


class CategoryCount(BaseModel):
    name: str
    value: int


class OrderAlerts(BaseModel):
    delayed: int = 0
    due_today: int = 0
    due_tomorrow: int = 0


class OrderWindow(BaseModel):
    orders: int = 0
    revenue: float = 0


class DashboardSummary(BaseModel):
    global_skus: int
    active_mappings: int
    total_inventory: int
    managed_stores: int
    stock_by_store: List[StoreStock] = Field(default_factory=list)
    category_distribution: List[CategoryCount] = Field(default_factory=list)
    orders_by_status: Dict[str, int] = Field(default_factory=dict)
    order_alerts: OrderAlerts = Field(default_factory=OrderAlerts)
    order_windows: Dict[str, OrderWindow] = Field(default_factory=dict)
