from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


StoreType = Literal["RETAIL", "WAREHOUSE", "ONLINE"]
StoreOwnership = Literal["OWN", "MARKETPLACE"]


class StoreCredentials(BaseModel):
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    endpoint: Optional[str] = None


class StoreBase(BaseModel):
    name: str = ""
    location: str = ""
    type: StoreType = "ONLINE"
    ownership: StoreOwnership = "OWN"


class StoreCreate(StoreBase):
    id: Optional[str] = None
    credentials: Optional[StoreCredentials] = None


class StoreUpdate(StoreBase):
    credentials: Optional[StoreCredentials] = None


class StoreRead(StoreBase):
    id: str
    endpoint: Optional[str] = None
    has_credentials: bool = False
    masked_api_key: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
