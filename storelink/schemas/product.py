from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from storelink.schemas.mapping import StoreMappingRead


Category = Literal["Electronics", "Home & Office", "Apparel", "Books", "Health & Beauty"]
ProductStatus = Literal["ACTIVE", "DRAFT", "ARCHIVED"]


class VariantInput(BaseModel):
    id: Optional[str] = None
    sku: Optional[str] = None
    size: str = ""
    color: str = ""
    price_adjustment: float = 0


class VariantRead(BaseModel):
    id: str
    sku: str
    size: str
    color: str
    price_adjustment: float

    model_config = ConfigDict(from_attributes=True)


class ProductBase(BaseModel):
    sku: str = ""
    name: str = ""
    category: Category = "Electronics"
    description: str = ""
    base_price: float = 0
    status: ProductStatus = "DRAFT"


class ProductCreate(ProductBase):
    id: Optional[str] = None
    variants: List[VariantInput] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    generate_lifestyle_images: bool = False


class ProductUpdate(ProductBase):
    variants: List[VariantInput] = Field(default_factory=list)
    images: Optional[List[str]] = None


class ProductRead(ProductBase):
    id: str
    variants: List[VariantRead] = Field(default_factory=list)
    mappings: List[StoreMappingRead] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    created_at: datetime
    total_stock: int = 0

    model_config = ConfigDict(from_attributes=True)
