from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field


class StoreVariantMappingBase(BaseModel):
    variant_id: str
    spid: str
    price: float = Field(ge=0)
    stock: int = Field(ge=0)

    model_config = ConfigDict(from_attributes=True)


class StoreVariantMappingDraft(StoreVariantMappingBase):
    pass


class StoreVariantMappingRead(StoreVariantMappingBase):
    pass


class StoreMappingBase(BaseModel):
    store_id: str
    spid: str
    price: float = Field(ge=0)
    base_stock: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("base_stock", "stock"),
    )
    enabled: bool = True

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StoreMappingDraft(StoreMappingBase):
    """A staged mapping; ``stock`` is always derived, never stored twice."""

    variant_mappings: List[StoreVariantMappingDraft] = Field(default_factory=list)

    @computed_field
    @property
    def stock(self) -> int:
        if self.variant_mappings:
            return sum(variant.stock for variant in self.variant_mappings)
        return self.base_stock

    def variant_mapping_for(self, variant_id):
        for variant_mapping in self.variant_mappings:
            if variant_mapping.variant_id == variant_id:
                return variant_mapping
        return None


class StoreMappingRead(StoreMappingBase):
    stock: int
    variant_mappings: List[StoreVariantMappingRead] = Field(default_factory=list)


class MappingOperation(BaseModel):
    op: Literal[
        "toggle_store",
        "set_enabled",
        "toggle_enabled",
        "update_mapping",
        "update_variant",
        "regenerate_spid",
    ]
    store_id: str
    variant_id: Optional[str] = None
    enabled: Optional[bool] = None
    spid: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None


class MappingEditRequest(BaseModel):
    operations: List[MappingOperation] = Field(default_factory=list)
    commit: bool = False


class MappingReplaceRequest(BaseModel):
    mappings: List[StoreMappingDraft] = Field(default_factory=list)


class MappingEditResponse(BaseModel):
    product_id: str
    committed: bool
    dirty: bool
    total_stock: int
    mappings: List[StoreMappingDraft]


class MappingSyncResponse(BaseModel):
    product_id: str
    store_id: str
    spid: str
    stock: int
    synced_at: str
