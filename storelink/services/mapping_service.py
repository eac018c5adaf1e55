import asyncio
import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from storelink.config import get_settings
from storelink.core.dates import utc_now
from storelink.core.errors import EntityNotFoundError, PreconditionFailed, ValidationFailed
from storelink.core.inflight import inflight
from storelink.core.mapping_editor import MappingEditor
from storelink.core.mapping_rules import (
    collect_spids,
    reconcile_variant_mappings,
    validate_mapping_drafts,
)
from storelink.models.mapping import StoreMapping, StoreVariantMapping
from storelink.models.product import Product
from storelink.models.store import Store

logger = logging.getLogger(__name__)


def _get_product(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise EntityNotFoundError("Product", product_id)
    return product


def _store_ids(db: Session) -> list[str]:
    return list(db.execute(select(Store.id).order_by(Store.id)).scalars().all())


def spids_by_store(db: Session, exclude_product_id=None) -> dict[str, set[str]]:
    """SPIDs in use per store, base and variant level."""
    taken = defaultdict(set)
    base_query = select(StoreMapping.store_id, StoreMapping.spid)
    variant_query = select(StoreMapping.store_id, StoreVariantMapping.spid).join(
        StoreVariantMapping, StoreVariantMapping.mapping_id == StoreMapping.id
    )
    if exclude_product_id is not None:
        base_query = base_query.where(StoreMapping.product_id != exclude_product_id)
        variant_query = variant_query.where(StoreMapping.product_id != exclude_product_id)
    for store_id, spid in db.execute(base_query).all():
        taken[store_id].add(spid)
    for store_id, spid in db.execute(variant_query).all():
        taken[store_id].add(spid)
    return dict(taken)


def write_mappings(product: Product, drafts) -> None:
    """Make ``product.mappings`` match ``drafts`` in place."""
    wanted = {draft.store_id: draft for draft in drafts}
    for mapping in list(product.mappings):
        if mapping.store_id not in wanted:
            product.mappings.remove(mapping)

    for draft in drafts:
        mapping = product.mapping_for(draft.store_id)
        if mapping is None:
            mapping = StoreMapping(store_id=draft.store_id)
            product.mappings.append(mapping)
        mapping.spid = draft.spid
        mapping.price = draft.price
        mapping.enabled = draft.enabled
        mapping.base_stock = draft.base_stock

        wanted_variants = {vm.variant_id: vm for vm in draft.variant_mappings}
        for variant_mapping in list(mapping.variant_mappings):
            if variant_mapping.variant_id not in wanted_variants:
                mapping.variant_mappings.remove(variant_mapping)
        for variant_draft in draft.variant_mappings:
            variant_mapping = mapping.variant_mapping_for(variant_draft.variant_id)
            if variant_mapping is None:
                variant_mapping = StoreVariantMapping(variant_id=variant_draft.variant_id)
                mapping.variant_mappings.append(variant_mapping)
            variant_mapping.spid = variant_draft.spid
            variant_mapping.price = variant_draft.price
            variant_mapping.stock = variant_draft.stock


def normalize_drafts(db: Session, product: Product, drafts):
    """Reconcile staged mappings with the product's variants and validate them."""
    settings = get_settings()
    normalized = []
    for draft in drafts:
        draft = draft.model_copy(deep=True)
        draft.spid = draft.spid.strip().upper()
        for variant_mapping in draft.variant_mappings:
            variant_mapping.spid = variant_mapping.spid.strip().upper()
        normalized.append(draft)

    taken_by_store = None
    if settings.ENFORCE_UNIQUE_SPIDS:
        taken_by_store = spids_by_store(db, exclude_product_id=product.id)
    errors = validate_mapping_drafts(normalized, _store_ids(db), taken_by_store=taken_by_store)
    if errors:
        raise ValidationFailed(errors)

    for draft in normalized:
        taken = None
        if taken_by_store is not None:
            taken = taken_by_store.setdefault(draft.store_id, set())
            taken.update(collect_spids(draft))
        reconcile_variant_mappings(
            draft,
            product.variants,
            product.base_price,
            default_stock=settings.DEFAULT_STOCK_LEVEL,
            taken=taken,
        )
    return normalized


def open_editor(db: Session, product_id: str) -> MappingEditor:
    product = _get_product(db, product_id)
    stores = db.execute(select(Store).order_by(Store.id)).scalars().all()
    return MappingEditor(product, stores, default_stock=get_settings().DEFAULT_STOCK_LEVEL)


def save_mappings(db: Session, product_id: str, drafts) -> Product:
    product = _get_product(db, product_id)
    normalized = normalize_drafts(db, product, drafts)
    write_mappings(product, normalized)
    db.commit()
    logger.info(
        "Saved %s store mapping(s) for product %s",
        len(normalized),
        product.id,
        extra={"product_id": product.id, "action": "save_mappings"},
    )
    return product


def edit_mappings(db: Session, product_id: str, operations, *, commit: bool = False):
    """Apply editor operations; persist only when ``commit`` is set."""
    editor = open_editor(db, product_id)
    editor.apply_all(operations)
    if commit and editor.is_dirty:
        save_mappings(db, product_id, editor.mappings)
    return editor


def toggle_mapping_enabled(db: Session, product_id: str, store_id: str) -> Product:
    product = _get_product(db, product_id)
    mapping = product.mapping_for(store_id)
    if mapping is None:
        raise EntityNotFoundError("Store mapping", f"{product_id}/{store_id}")
    mapping.enabled = not mapping.enabled
    db.commit()
    logger.info(
        "Mapping %s/%s %s",
        product_id,
        store_id,
        "enabled" if mapping.enabled else "disabled",
        extra={"product_id": product_id, "store_id": store_id, "action": "toggle_enabled"},
    )
    return product


async def sync_mapping(db: Session, product_id: str, store_id: str, *, delay=None) -> dict:
    """Simulated push of one mapping to its storefront."""
    product = _get_product(db, product_id)
    mapping = product.mapping_for(store_id)
    if mapping is None:
        raise EntityNotFoundError("Store mapping", f"{product_id}/{store_id}")
    if not mapping.enabled:
        raise PreconditionFailed(f"Mapping {product_id}/{store_id} is disabled")

    if delay is None:
        delay = get_settings().STORE_SYNC_DELAY_SECONDS
    with inflight.claim(("store_sync", product_id, store_id)):
        # TODO: replace with the storefront catalog API call once stores expose one.
        await asyncio.sleep(delay)
    logger.info(
        "Synced %s to store %s as %s",
        product_id,
        store_id,
        mapping.spid,
        extra={"product_id": product_id, "store_id": store_id, "action": "store_sync"},
    )
    return {
        "product_id": product_id,
        "store_id": store_id,
        "spid": mapping.spid,
        "stock": mapping.stock,
        "synced_at": utc_now().isoformat(),
    }


__all__ = [
    "edit_mappings",
    "normalize_drafts",
    "open_editor",
    "save_mappings",
    "spids_by_store",
    "sync_mapping",
    "toggle_mapping_enabled",
    "write_mappings",
]
