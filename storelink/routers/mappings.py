from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storelink.core.errors import StoreLinkError
from storelink.dependencies import get_db
from storelink.routers.errors import http_error
from storelink.schemas.mapping import (
    MappingEditRequest,
    MappingEditResponse,
    MappingReplaceRequest,
    MappingSyncResponse,
    StoreMappingRead,
)
from storelink.services import mapping_service
from storelink.services.product_service import get_product

router = APIRouter(prefix="/products/{product_id}/mappings", tags=["Store Mappings"])


@router.get("", response_model=List[StoreMappingRead])
def list_mappings(product_id: str, db: Session = Depends(get_db)):
    try:
        return get_product(db, product_id).mappings
    except StoreLinkError as exc:
        raise http_error(exc) from exc


@router.post("/edit", response_model=MappingEditResponse)
def edit_mappings(product_id: str, payload: MappingEditRequest, db: Session = Depends(get_db)):
    """Apply editor operations to the staged mapping set.

    With ``commit`` false the result is a preview and nothing is stored.
    """
    try:
        editor = mapping_service.edit_mappings(
            db,
            product_id,
            payload.operations,
            commit=payload.commit,
        )
    except StoreLinkError as exc:
        raise http_error(exc) from exc
    return MappingEditResponse(
        product_id=product_id,
        committed=payload.commit and editor.is_dirty,
        dirty=editor.is_dirty,
        total_stock=editor.total_stock,
        mappings=editor.mappings,
    )


@router.put("", response_model=List[StoreMappingRead])
def replace_mappings(product_id: str, payload: MappingReplaceRequest, db: Session = Depends(get_db)):
    try:
        product = mapping_service.save_mappings(db, product_id, payload.mappings)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
    return product.mappings


@router.post("/{store_id}/toggle", response_model=StoreMappingRead)
def toggle_mapping(product_id: str, store_id: str, db: Session = Depends(get_db)):
    try:
        product = mapping_service.toggle_mapping_enabled(db, product_id, store_id)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
    return product.mapping_for(store_id)


@router.post("/{store_id}/sync", response_model=MappingSyncResponse)
async def sync_mapping(product_id: str, store_id: str, db: Session = Depends(get_db)):
    try:
        return await mapping_service.sync_mapping(db, product_id, store_id)
    except StoreLinkError as exc:
        raise http_error(exc) from exc
