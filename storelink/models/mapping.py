from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storelink.database.base import Base


class StoreMapping(Base):
    __tablename__ = "store_mappings"

    id = Column(Integer, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    store_id = Column(String, ForeignKey("stores.id"), nullable=False)

    spid = Column(String, nullable=False)
    price = Column(Float, nullable=False, default=0)
    # Authoritative only while the mapping has no variant mappings.
    base_stock = Column("stock", Integer, nullable=False, default=0)
    enabled = Column(Boolean, nullable=False, default=True)

    product = relationship("Product", back_populates="mappings")
    variant_mappings = relationship(
        "StoreVariantMapping",
        back_populates="mapping",
        order_by="StoreVariantMapping.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("product_id", "store_id", name="uq_store_mappings_product_store"),
        Index("idx_store_mappings_store_spid", "store_id", "spid"),
    )

    @property
    def stock(self) -> int:
        if self.variant_mappings:
            return sum(variant.stock for variant in self.variant_mappings)
        return self.base_stock or 0

    @stock.setter
    def stock(self, value: int) -> None:
        if self.variant_mappings:
            raise ValueError("stock is derived from variant mappings")
        self.base_stock = value

    def variant_mapping_for(self, variant_id):
        for variant_mapping in self.variant_mappings:
            if variant_mapping.variant_id == variant_id:
                return variant_mapping
        return None


class StoreVariantMapping(Base):
    __tablename__ = "store_variant_mappings"

    id = Column(Integer, primary_key=True)
    mapping_id = Column(Integer, ForeignKey("store_mappings.id", ondelete="CASCADE"), nullable=False)
    variant_id = Column(String, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False)

    spid = Column(String, nullable=False)
    price = Column(Float, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)

    mapping = relationship("StoreMapping", back_populates="variant_mappings")
    variant = relationship("ProductVariant")

    __table_args__ = (
        UniqueConstraint("mapping_id", "variant_id", name="uq_store_variant_mappings_variant"),
    )


__all__ = ["StoreMapping", "StoreVariantMapping"]
