from storelink.database.base import Base
from storelink.database.engine import build_engine, engine
from storelink.database.session import SessionLocal, get_db
from storelink.database.types import UTCDateTime

__all__ = ["Base", "SessionLocal", "UTCDateTime", "build_engine", "engine", "get_db"]
