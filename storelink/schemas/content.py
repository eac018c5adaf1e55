from typing import List, Optional

from pydantic import BaseModel, Field

from storelink.schemas.product import Category


class ContentRequest(BaseModel):
    name: str = Field(min_length=1)
    category: Category


class SmartSuggestionsRequest(ContentRequest):
    sku: Optional[str] = None


class DescriptionResponse(BaseModel):
    description: str


class SkuResponse(BaseModel):
    sku: str


class SmartSuggestionsResponse(BaseModel):
    description: str
    sku: str


class LifestyleImagesRequest(BaseModel):
    image_base64: str = Field(min_length=1)
    category: Category


class LifestyleImagesResponse(BaseModel):
    images: List[str] = Field(default_factory=list)
