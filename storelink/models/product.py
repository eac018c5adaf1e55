from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from storelink.database.base import Base
from storelink.database.types import UTCDateTime


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    sku = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    base_price = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="DRAFT")

    # First entry is the original upload; the rest are derived previews.
    images = Column(JSON, nullable=False, default=list)

    created_at = Column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    variants = relationship(
        "ProductVariant",
        back_populates="product",
        order_by="ProductVariant.position",
        cascade="all, delete-orphan",
    )
    mappings = relationship(
        "StoreMapping",
        back_populates="product",
        order_by="StoreMapping.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_products_sku", "sku"),
    )

    def mapping_for(self, store_id):
        for mapping in self.mappings:
            if mapping.store_id == store_id:
                return mapping
        return None

    @property
    def total_stock(self) -> int:
        return sum(mapping.stock for mapping in self.mappings)


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(String, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    sku = Column(String, nullable=False)
    size = Column(String, nullable=False, default="")
    color = Column(String, nullable=False, default="")
    price_adjustment = Column(Float, nullable=False, default=0)

    product = relationship("Product", back_populates="variants")


__all__ = ["Product", "ProductVariant"]
