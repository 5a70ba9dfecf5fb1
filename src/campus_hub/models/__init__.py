"""SQLAlchemy tables backing the sql persistence adapter."""

from .document import StoredDocument, StoreRevision

__all__ = [
    "StoreRevision",
    "StoredDocument",
]
