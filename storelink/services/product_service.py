import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storelink.config import get_settings
from storelink.core.errors import EntityNotFoundError, ValidationFailed
from storelink.core.identifiers import new_product_id, new_variant_id, variant_sku
from storelink.core.mapping_rules import generate_initial_mappings, reconcile_variant_mappings
from storelink.models.product import Product, ProductVariant
from storelink.models.store import Store
from storelink.schemas.mapping import StoreMappingDraft
from storelink.services.mapping_service import spids_by_store, write_mappings

logger = logging.getLogger(__name__)


def validate_product(payload, *, require_image: bool) -> dict:
    errors = {}
    if not (payload.name or "").strip():
        errors["name"] = "Product name is required"
    if not (payload.sku or "").strip():
        errors["sku"] = "SKU is required"
    if (payload.base_price or 0) <= 0:
        errors["base_price"] = "Price must be greater than 0"
    if require_image and not [image for image in payload.images or [] if image]:
        errors["images"] = "At least one product image is required"
    for index, variant in enumerate(payload.variants):
        if not (variant.color or "").strip() and not (variant.size or "").strip():
            errors[f"variants[{index}]"] = "Variant needs a color or a size"
    return errors


def list_products(db: Session, query=None) -> list[Product]:
    stmt = select(Product).order_by(Product.created_at, Product.id)
    query_text = (query or "").strip().lower()
    if query_text:
        pattern = f"%{query_text}%"
        stmt = stmt.where(
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.sku).like(pattern),
                func.lower(Product.id).like(pattern),
            )
        )
    return list(db.execute(stmt).scalars().all())


def get_product(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise EntityNotFoundError("Product", product_id)
    return product


def _sync_variants(product: Product, variant_inputs, *, sku_changed: bool) -> list[ProductVariant]:
    """Update ``product.variants`` from input; returns variants to drop.

    Variant SKUs are rebuilt when color, size or the base SKU change.
    """
    existing = {variant.id: variant for variant in product.variants}
    kept_ids = set()
    for position, variant_input in enumerate(variant_inputs):
        color = (variant_input.color or "").strip()
        size = (variant_input.size or "").strip()
        variant = existing.get(variant_input.id) if variant_input.id else None
        if variant is None or variant.id in kept_ids:
            variant = ProductVariant(
                id=new_variant_id(),
                sku=(variant_input.sku or "").strip().upper() or variant_sku(product.sku, color, size),
                color=color,
                size=size,
            )
            product.variants.append(variant)
        elif sku_changed or variant.color != color or variant.size != size:
            variant.sku = variant_sku(product.sku, color, size)
            variant.color = color
            variant.size = size
        elif variant_input.sku:
            variant.sku = variant_input.sku.strip().upper()
        variant.position = position
        variant.price_adjustment = float(variant_input.price_adjustment or 0)
        kept_ids.add(variant.id)
    return [variant for variant in product.variants if variant.id not in kept_ids]


def _apply_product_fields(product: Product, payload) -> None:
    product.sku = payload.sku.strip().upper()
    product.name = payload.name.strip()
    product.category = payload.category
    product.description = payload.description or ""
    product.base_price = float(payload.base_price)
    product.status = payload.status


def create_product(db: Session, payload, content=None) -> Product:
    errors = validate_product(payload, require_image=True)
    product_id = (payload.id or "").strip() or new_product_id()
    if db.get(Product, product_id) is not None:
        errors["id"] = f"Product {product_id} already exists"
    if errors:
        raise ValidationFailed(errors)

    settings = get_settings()
    images = [image for image in payload.images if image]
    if payload.generate_lifestyle_images and content is not None:
        try:
            images.extend(content.generate_lifestyle_images(images[0], payload.category))
        except Exception:
            # The product keeps only its original image.
            logger.warning("Lifestyle images failed for product %s", product_id, exc_info=True)

    product = Product(
        id=product_id,
        images=images,
        created_at=datetime.now(timezone.utc),
    )
    _apply_product_fields(product, payload)
    _sync_variants(product, payload.variants, sku_changed=False)
    db.add(product)
    db.flush()

    stores = db.execute(select(Store).order_by(Store.id)).scalars().all()
    taken_by_store = spids_by_store(db) if settings.ENFORCE_UNIQUE_SPIDS else None
    drafts = generate_initial_mappings(
        product,
        stores,
        default_stock=settings.DEFAULT_STOCK_LEVEL,
        taken_by_store=taken_by_store,
    )
    write_mappings(product, drafts)
    db.commit()
    logger.info(
        "Product %s (%s) created with %s variant(s), %s image(s), mapped to %s store(s)",
        product.id,
        product.sku,
        len(product.variants),
        len(product.images),
        len(product.mappings),
        extra={"product_id": product.id, "action": "create_product"},
    )
    return product


def update_product(db: Session, product_id: str, payload) -> Product:
    product = get_product(db, product_id)
    errors = validate_product(payload, require_image=payload.images is not None)
    if errors:
        raise ValidationFailed(errors)

    settings = get_settings()
    sku_changed = payload.sku.strip().upper() != product.sku
    _apply_product_fields(product, payload)
    if payload.images is not None:
        product.images = [image for image in payload.images if image]

    dropped = _sync_variants(product, payload.variants, sku_changed=sku_changed)
    db.flush()

    dropped_ids = {variant.id for variant in dropped}
    variants = [variant for variant in product.variants if variant.id not in dropped_ids]
    taken_by_store = spids_by_store(db) if settings.ENFORCE_UNIQUE_SPIDS else {}
    drafts = []
    for mapping in product.mappings:
        draft = StoreMappingDraft.model_validate(mapping, from_attributes=True)
        reconcile_variant_mappings(
            draft,
            variants,
            product.base_price,
            default_stock=settings.DEFAULT_STOCK_LEVEL,
            taken=taken_by_store.setdefault(mapping.store_id, set()),
        )
        drafts.append(draft)
    write_mappings(product, drafts)
    db.flush()

    for variant in dropped:
        product.variants.remove(variant)
    db.commit()
    logger.info(
        "Product %s updated (%s variant(s), %s removed)",
        product.id,
        len(product.variants),
        len(dropped),
        extra={"product_id": product.id, "action": "update_product"},
    )
    return product


def delete_product(db: Session, product_id: str, *, confirm: bool) -> None:
    product = get_product(db, product_id)
    if not confirm:
        raise ValidationFailed(
            {"confirm": "Deleting a product removes all of its store mappings; confirm to proceed"}
        )
    mapping_count = len(product.mappings)
    db.delete(product)
    db.commit()
    logger.info(
        "Product %s deleted with %s store mapping(s)",
        product_id,
        mapping_count,
        extra={"product_id": product_id, "action": "delete_product"},
    )


__all__ = [
    "create_product",
    "delete_product",
    "get_product",
    "list_products",
    "update_product",
    "validate_product",
]
