from fastapi import APIRouter, Depends

from storelink.schemas.content import (
    ContentRequest,
    DescriptionResponse,
    LifestyleImagesRequest,
    LifestyleImagesResponse,
    SkuResponse,
    SmartSuggestionsRequest,
    SmartSuggestionsResponse,
)
from storelink.services.content_service import ContentService, get_content_service

router = APIRouter(prefix="/content", tags=["Content"])

# Content calls never fail the request; the service answers with fallbacks.


@router.post("/description", response_model=DescriptionResponse)
def generate_description(
    payload: ContentRequest,
    content: ContentService = Depends(get_content_service),
):
    return {"description": content.generate_description(payload.name, payload.category)}


@router.post("/sku", response_model=SkuResponse)
def suggest_sku(
    payload: ContentRequest,
    content: ContentService = Depends(get_content_service),
):
    return {"sku": content.suggest_sku(payload.name, payload.category)}


@router.post("/smart-suggestions", response_model=SmartSuggestionsResponse)
def smart_suggestions(
    payload: SmartSuggestionsRequest,
    content: ContentService = Depends(get_content_service),
):
    return content.smart_suggestions(payload.name, payload.category, payload.sku)


@router.post("/lifestyle-images", response_model=LifestyleImagesResponse)
def lifestyle_images(
    payload: LifestyleImagesRequest,
    content: ContentService = Depends(get_content_service),
):
    return {"images": content.generate_lifestyle_images(payload.image_base64, payload.category)}
