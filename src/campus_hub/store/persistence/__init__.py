"""Interchangeable durable media for the entity store."""

from .base import PersistenceAdapter, decode_records
from .json_file import JsonFilePersistence
from .sql import SqlPersistence

__all__ = [
    "JsonFilePersistence",
    "PersistenceAdapter",
    "SqlPersistence",
    "decode_records",
]
