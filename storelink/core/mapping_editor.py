from storelink.core.errors import EntityNotFoundError, ValidationFailed
from storelink.core.identifiers import product_spid, variant_spid
from storelink.core.mapping_rules import DEFAULT_STOCK_LEVEL, build_store_mapping
from storelink.schemas.mapping import StoreMappingDraft


def _as_draft(mapping):
    if isinstance(mapping, StoreMappingDraft):
        return mapping.model_copy(deep=True)
    return StoreMappingDraft.model_validate(mapping, from_attributes=True)


def _snapshot(mappings):
    return [mapping.model_dump() for mapping in mappings]


class MappingEditor:
    """Stages mapping changes for one product until they are saved.

    Every mutation keeps the staged set consistent: one mapping per store,
    one variant mapping per variant and stock derived from variant stock.
    """

    def __init__(self, product, stores, mappings=None, *, default_stock=DEFAULT_STOCK_LEVEL):
        self.product = product
        self.store_ids = [store.id for store in stores]
        self.default_stock = default_stock
        source = product.mappings if mappings is None else mappings
        self._mappings = [_as_draft(mapping) for mapping in source]
        self._original = _snapshot(self._mappings)

    @property
    def mappings(self):
        return list(self._mappings)

    @property
    def is_dirty(self) -> bool:
        return _snapshot(self._mappings) != self._original

    @property
    def total_stock(self) -> int:
        return sum(mapping.stock for mapping in self._mappings)

    def has_store(self, store_id) -> bool:
        return any(mapping.store_id == store_id for mapping in self._mappings)

    def get(self, store_id):
        for mapping in self._mappings:
            if mapping.store_id == store_id:
                return mapping
        raise EntityNotFoundError("Store mapping", store_id)

    def _variant(self, mapping, variant_id):
        variant_mapping = mapping.variant_mapping_for(variant_id)
        if variant_mapping is None:
            raise EntityNotFoundError("Variant mapping", variant_id)
        return variant_mapping

    def _staged_spids(self, store_id):
        spids = set()
        for mapping in self._mappings:
            if mapping.store_id != store_id:
                continue
            spids.add(mapping.spid)
            spids.update(variant.spid for variant in mapping.variant_mappings)
        return spids

    def toggle_store(self, store_id):
        """Add a generated mapping for ``store_id`` or drop the existing one."""
        if self.has_store(store_id):
            self._mappings = [m for m in self._mappings if m.store_id != store_id]
            return None
        if store_id not in self.store_ids:
            raise EntityNotFoundError("Store", store_id)
        mapping = build_store_mapping(
            self.product,
            store_id,
            default_stock=self.default_stock,
            taken=self._staged_spids(store_id),
        )
        self._mappings.append(mapping)
        return mapping

    def set_enabled(self, store_id, enabled: bool):
        mapping = self.get(store_id)
        mapping.enabled = bool(enabled)
        return mapping

    def toggle_enabled(self, store_id):
        mapping = self.get(store_id)
        mapping.enabled = not mapping.enabled
        return mapping

    def update_mapping(self, store_id, *, spid=None, price=None, stock=None):
        mapping = self.get(store_id)
        errors = {}
        if stock is not None and mapping.variant_mappings:
            errors["stock"] = "Stock is derived from variant mappings"
        elif stock is not None and stock < 0:
            errors["stock"] = "Stock cannot be negative"
        if price is not None and price < 0:
            errors["price"] = "Price cannot be negative"
        if spid is not None and not spid.strip():
            errors["spid"] = "SPID is required"
        if errors:
            raise ValidationFailed(errors)

        if spid is not None:
            mapping.spid = spid.strip().upper()
        if price is not None:
            mapping.price = float(price)
        if stock is not None:
            mapping.base_stock = int(stock)
        return mapping

    def update_variant(self, store_id, variant_id, *, spid=None, price=None, stock=None):
        mapping = self.get(store_id)
        variant_mapping = self._variant(mapping, variant_id)
        errors = {}
        if stock is not None and stock < 0:
            errors["stock"] = "Stock cannot be negative"
        if price is not None and price < 0:
            errors["price"] = "Price cannot be negative"
        if spid is not None and not spid.strip():
            errors["spid"] = "SPID is required"
        if errors:
            raise ValidationFailed(errors)

        if spid is not None:
            variant_mapping.spid = spid.strip().upper()
        if price is not None:
            variant_mapping.price = float(price)
        if stock is not None:
            variant_mapping.stock = int(stock)
        return mapping

    def regenerate_spid(self, store_id, variant_id=None):
        mapping = self.get(store_id)
        taken = self._staged_spids(store_id)
        if variant_id is None:
            mapping.spid = product_spid(store_id, self.product.sku, self.product.id, taken)
            return mapping

        variant_mapping = self._variant(mapping, variant_id)
        variant = next((v for v in self.product.variants if v.id == variant_id), None)
        if variant is None:
            raise EntityNotFoundError("Variant", variant_id)
        variant_mapping.spid = variant_spid(store_id, variant.sku, taken)
        return mapping

    def apply(self, operation):
        op = operation.op
        if op == "toggle_store":
            return self.toggle_store(operation.store_id)
        if op == "set_enabled":
            if operation.enabled is None:
                raise ValidationFailed({"enabled": "enabled is required for set_enabled"})
            return self.set_enabled(operation.store_id, operation.enabled)
        if op == "toggle_enabled":
            return self.toggle_enabled(operation.store_id)
        if op == "update_mapping":
            return self.update_mapping(
                operation.store_id,
                spid=operation.spid,
                price=operation.price,
                stock=operation.stock,
            )
        if op == "update_variant":
            if not operation.variant_id:
                raise ValidationFailed({"variant_id": "variant_id is required for update_variant"})
            return self.update_variant(
                operation.store_id,
                operation.variant_id,
                spid=operation.spid,
                price=operation.price,
                stock=operation.stock,
            )
        if op == "regenerate_spid":
            return self.regenerate_spid(operation.store_id, operation.variant_id)
        raise ValidationFailed({"op": f"Unsupported operation: {op}"})

    def apply_all(self, operations):
        for operation in operations:
            self.apply(operation)
        return self.mappings
