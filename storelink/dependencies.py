from typing import Optional

from fastapi import Header

from storelink.config import get_settings
from storelink.database.session import get_db


def get_actor(actor: Optional[str] = Header(None, alias="X-Actor")) -> str:
    """User name recorded on audit entries."""
    return (actor or "").strip() or get_settings().DEFAULT_ACTOR


__all__ = ["get_actor", "get_db"]
