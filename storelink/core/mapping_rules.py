"""Derivation rules for store mappings.

Functions here work on anything shaped like a product (``id``, ``sku``,
``base_price``, ``variants``) so the same rules serve ORM rows and staged
drafts.
"""

from storelink.core.identifiers import product_spid, variant_spid
from storelink.schemas.mapping import StoreMappingDraft, StoreVariantMappingDraft

DEFAULT_STOCK_LEVEL = 1000


def _remember(taken, spid):
    if taken is not None:
        taken.add(spid)
    return spid


def variant_price(base_price, variant) -> float:
    return round(float(base_price or 0) + float(variant.price_adjustment or 0), 2)


def build_variant_mapping(store_id, variant, base_price, *, default_stock=DEFAULT_STOCK_LEVEL, taken=None):
    spid = _remember(taken, variant_spid(store_id, variant.sku, taken))
    return StoreVariantMappingDraft(
        variant_id=variant.id,
        spid=spid,
        price=variant_price(base_price, variant),
        stock=default_stock,
    )


def build_store_mapping(product, store_id, *, default_stock=DEFAULT_STOCK_LEVEL, taken=None):
    spid = _remember(taken, product_spid(store_id, product.sku, product.id, taken))
    variant_mappings = [
        build_variant_mapping(
            store_id,
            variant,
            product.base_price,
            default_stock=default_stock,
            taken=taken,
        )
        for variant in product.variants
    ]
    return StoreMappingDraft(
        store_id=store_id,
        spid=spid,
        price=float(product.base_price or 0),
        base_stock=0 if variant_mappings else default_stock,
        enabled=True,
        variant_mappings=variant_mappings,
    )


def generate_initial_mappings(product, stores, *, default_stock=DEFAULT_STOCK_LEVEL, taken_by_store=None):
    """One enabled mapping per store for a freshly created product."""
    taken_by_store = taken_by_store if taken_by_store is not None else {}
    mappings = []
    for store in stores:
        taken = taken_by_store.setdefault(store.id, set())
        mappings.append(
            build_store_mapping(product, store.id, default_stock=default_stock, taken=taken)
        )
    return mappings


def reconcile_variant_mappings(mapping, variants, base_price, *, default_stock=DEFAULT_STOCK_LEVEL, taken=None):
    """Bring ``mapping`` in line with ``variants``.

    Variant mappings of removed variants are dropped, new variants get a
    generated entry and kept entries are left as they are. When the last
    variant goes away the derived stock becomes the base stock.
    """
    previous_stock = mapping.stock
    existing = {}
    for variant_mapping in mapping.variant_mappings:
        existing.setdefault(variant_mapping.variant_id, variant_mapping)

    reconciled = []
    for variant in variants:
        variant_mapping = existing.get(variant.id)
        if variant_mapping is None:
            variant_mapping = build_variant_mapping(
                mapping.store_id,
                variant,
                base_price,
                default_stock=default_stock,
                taken=taken,
            )
        reconciled.append(variant_mapping)

    if mapping.variant_mappings and not reconciled:
        mapping.base_stock = previous_stock
    mapping.variant_mappings = reconciled
    return mapping


def collect_spids(mapping):
    spids = [mapping.spid]
    spids.extend(variant_mapping.spid for variant_mapping in mapping.variant_mappings)
    return spids


def validate_mapping_drafts(drafts, store_ids, *, taken_by_store=None):
    """Field errors for a staged mapping set; empty when the set is valid.

    ``taken_by_store`` maps store ids to SPIDs held by other products; when
    given, reuse of those SPIDs in the same store is reported.
    """
    errors = {}
    known_stores = set(store_ids)
    seen_stores = set()
    for index, draft in enumerate(drafts):
        prefix = f"mappings[{index}]"
        if draft.store_id not in known_stores:
            errors[f"{prefix}.store_id"] = f"Unknown store: {draft.store_id}"
        elif draft.store_id in seen_stores:
            errors[f"{prefix}.store_id"] = f"Duplicate mapping for store {draft.store_id}"
        seen_stores.add(draft.store_id)

        if not draft.spid.strip():
            errors[f"{prefix}.spid"] = "SPID is required"

        seen_variants = set()
        for variant_index, variant_mapping in enumerate(draft.variant_mappings):
            if variant_mapping.variant_id in seen_variants:
                key = f"{prefix}.variant_mappings[{variant_index}].variant_id"
                errors[key] = f"Duplicate mapping for variant {variant_mapping.variant_id}"
            seen_variants.add(variant_mapping.variant_id)
            if not variant_mapping.spid.strip():
                errors[f"{prefix}.variant_mappings[{variant_index}].spid"] = "SPID is required"

        if taken_by_store is None:
            continue
        taken = taken_by_store.get(draft.store_id, set())
        spids = collect_spids(draft)
        duplicates = sorted({spid for spid in spids if spid in taken or spids.count(spid) > 1})
        if duplicates:
            errors[f"{prefix}.spid"] = "SPID already in use in this store: {}".format(
                ", ".join(duplicates)
            )
    return errors
