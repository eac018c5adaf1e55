"""Best-effort generative content for the product form.

Every public call on ``ContentService`` degrades to a fallback value instead
of raising, so a failing or unconfigured Gemini backend never blocks a save.
"""

import base64
import binascii
import logging
import threading
from functools import lru_cache
from typing import Any, List, Optional

import google.generativeai as genai

from storelink.config import get_settings
from storelink.core.identifiers import fallback_sku

logger = logging.getLogger(__name__)

DESCRIPTION_FALLBACK = "Unable to generate description at this time."
DESCRIPTION_EMPTY = "Failed to generate description."
SKU_EMPTY = "SKU-ERROR"

_LIFESTYLE_PROMPTS = (
    "High-quality professional lifestyle photography. A male fashion model wearing this "
    "exactly depicted {category} in an urban outdoor city background. Sharp focus, "
    "cinematic lighting, 8k resolution.",
    "High-quality professional lifestyle photography. A female fashion model wearing this "
    "exactly depicted {category} in a minimalist high-end studio background. Sharp focus, "
    "soft fashion lighting, 8k resolution.",
)


class ContentClientError(RuntimeError):
    """Raised when the Gemini client cannot fulfil a request."""


class GenerativeContentClient:
    """Thin wrapper around google-generativeai models used by the catalog."""

    _configure_lock = threading.Lock()
    _configured_key: Optional[str] = None

    def __init__(
        self,
        api_key: Optional[str],
        *,
        text_model: str,
        image_model: str,
        request_timeout: int = 45,
    ) -> None:
        if not api_key:
            raise ContentClientError("GEMINI_API_KEY is not configured.")
        self._api_key = api_key
        self._text_model = text_model
        self._image_model = image_model
        self._request_timeout = request_timeout
        self._models: dict[str, Any] = {}
        self._ensure_configured()

    def _ensure_configured(self) -> None:
        cls = self.__class__
        if cls._configured_key == self._api_key:
            return
        with cls._configure_lock:
            if cls._configured_key != self._api_key:
                genai.configure(api_key=self._api_key)
                cls._configured_key = self._api_key

    def _get_model(self, name: str):
        model = self._models.get(name)
        if model is None:
            model = genai.GenerativeModel(model_name=name)
            self._models[name] = model
        return model

    def _generate(self, model_name: str, contents):
        try:
            model = self._get_model(model_name)
            return model.generate_content(
                contents,
                request_options={"timeout": self._request_timeout},
            )
        except Exception as exc:
            raise ContentClientError(f"Gemini request failed: {exc}") from exc

    def generate_text(self, prompt: str) -> str:
        response = self._generate(self._text_model, prompt)
        try:
            return response.text or ""
        except ValueError:
            # Blocked or empty candidates raise on ``.text``.
            return ""

    def generate_images(self, image_bytes: bytes, prompt: str, mime_type: str = "image/jpeg") -> List[bytes]:
        response = self._generate(
            self._image_model,
            [{"mime_type": mime_type, "data": image_bytes}, prompt],
        )
        images = []
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline_data = getattr(part, "inline_data", None)
                data = getattr(inline_data, "data", None) if inline_data is not None else None
                if data:
                    images.append(data)
            break
        return images


def strip_data_url(value: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if present."""
    head, sep, tail = value.partition(",")
    if sep and head.startswith("data:"):
        return tail
    return value


class ContentService:
    def __init__(self, client: Optional[GenerativeContentClient] = None, client_error: Optional[str] = None):
        self._client = client
        self._client_error = client_error

    @classmethod
    def from_settings(cls) -> "ContentService":
        settings = get_settings()
        try:
            client = GenerativeContentClient(
                settings.GEMINI_API_KEY,
                text_model=settings.GEMINI_TEXT_MODEL,
                image_model=settings.GEMINI_IMAGE_MODEL,
                request_timeout=settings.GEMINI_REQUEST_TIMEOUT_SECONDS,
            )
        except ContentClientError as exc:
            logger.info("Generative content disabled: %s", exc)
            return cls(client=None, client_error=str(exc))
        return cls(client=client)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _require_client(self) -> GenerativeContentClient:
        if self._client is None:
            raise ContentClientError(self._client_error or "Generative content client unavailable.")
        return self._client

    def generate_description(self, product_name: str, category: str) -> str:
        prompt = (
            f'Write a compelling, professional e-commerce product description for a "{product_name}" '
            f'in the "{category}" category. Keep it under 150 words. Focus on benefits and quality.'
        )
        try:
            text = self._require_client().generate_text(prompt)
        except ContentClientError:
            logger.warning("Description generation failed for %s", product_name, exc_info=True)
            return DESCRIPTION_FALLBACK
        return text.strip() or DESCRIPTION_EMPTY

    def suggest_sku(self, product_name: str, category: str) -> str:
        prompt = (
            "Generate a concise, standard 8-character SKU (Stock Keeping Unit) for a product named "
            f'"{product_name}" in the "{category}" category. Just return the SKU string, no extra text.'
        )
        try:
            text = self._require_client().generate_text(prompt)
        except ContentClientError:
            logger.warning("SKU suggestion failed for %s", product_name, exc_info=True)
            return fallback_sku()
        return text.strip().upper() or SKU_EMPTY

    def smart_suggestions(self, product_name: str, category: str, sku: Optional[str] = None) -> dict:
        description = self.generate_description(product_name, category)
        suggested_sku = sku.strip().upper() if sku and sku.strip() else self.suggest_sku(product_name, category)
        return {"description": description, "sku": suggested_sku}

    def generate_lifestyle_images(self, source_image_base64: str, category: str) -> List[str]:
        """Up to two on-model previews as base64; ``[]`` on any failure."""
        try:
            client = self._require_client()
            image_bytes = base64.b64decode(strip_data_url(source_image_base64), validate=True)
            results = []
            for template in _LIFESTYLE_PROMPTS:
                for data in client.generate_images(image_bytes, template.format(category=category)):
                    results.append(base64.b64encode(data).decode("ascii"))
        except (ContentClientError, binascii.Error, TypeError, ValueError):
            logger.warning("Lifestyle image generation failed", exc_info=True)
            return []
        return results[: len(_LIFESTYLE_PROMPTS)]


@lru_cache
def get_content_service() -> ContentService:
    return ContentService.from_settings()


__all__ = [
    "ContentClientError",
    "ContentService",
    "GenerativeContentClient",
    "get_content_service",
    "strip_data_url",
]
