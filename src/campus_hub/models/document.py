"""Document table holding serialized entity records."""

from sqlalchemy import JSON, Column, DateTime, Integer, String

from ..core.database import Base
from ..utils.datetime import utc_now


class StoredDocument(Base):
    """One entity record, keyed by kind and id, stored as a JSON payload."""

    __tablename__ = "documents"

    kind = Column(String(32), primary_key=True)
    entity_id = Column(String(128), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class StoreRevision(Base):
    """Single-row counter bumped by every save; other processes poll it."""

    __tablename__ = "store_revision"

    revision_id = Column(Integer, primary_key=True)
    revision = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
