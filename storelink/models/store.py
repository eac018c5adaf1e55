from sqlalchemy import Column, String

from storelink.database.base import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False, default="")
    type = Column(String(20), nullable=False, default="ONLINE")
    ownership = Column(String(20), nullable=False, default="OWN")

    api_key = Column(String)
    api_secret = Column(String)
    endpoint = Column(String)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    @property
    def masked_api_key(self):
        if not self.api_key:
            return None
        return "*" * max(len(self.api_key) - 4, 4) + self.api_key[-4:]


__all__ = ["Store"]
