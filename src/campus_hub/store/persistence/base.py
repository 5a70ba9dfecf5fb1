"""Persistence adapter interface shared by every durable medium."""

from __future__ import annotations

import abc
import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from ...schemas import RECORD_TYPES, Record
from ..entity_store import Change, Snapshot

logger = logging.getLogger(__name__)

LoadedTables = dict[str, dict[str, Record]]


def decode_records(kind: str, raw: Any) -> dict[str, Record]:
    """Validate persisted payloads for one kind.

    Missing or malformed data yields an empty table for that kind; the other
    kinds load independently.
    """

    if raw is None:
        return {}
    model = RECORD_TYPES[kind]
    try:
        if isinstance(raw, (str, bytes, dict)):
            raise TypeError(f"expected a list of records, got {type(raw).__name__}")
        records = [model.model_validate(item) for item in raw]
    except (ValidationError, TypeError) as exc:
        logger.warning("discarding malformed persisted %s: %s", kind, exc)
        return {}
    return {record.id: record for record in records}


def encode_record(record: Record) -> dict[str, Any]:
    return record.model_dump(mode="json")


class PersistenceAdapter(abc.ABC):
    """Durable medium holding a copy of the entity store.

    ``fingerprint`` identifies the medium's current content so the store can
    tell its own writes from writes made by another process.
    """

    name = "abstract"

    @abc.abstractmethod
    def load_all(self) -> LoadedTables:
        """Read every kind; raises ``PersistenceUnavailable`` when unreadable."""

    def load_state(self) -> tuple[LoadedTables, Optional[str]]:
        """Read every kind together with the fingerprint of what was read."""

        return self.load_all(), self.fingerprint()

    @abc.abstractmethod
    def save(self, snapshot: Snapshot, changes: Optional[Sequence[Change]] = None) -> Optional[str]:
        """Write ``snapshot`` and return the new fingerprint.

        ``changes`` lists what the last mutation touched; ``None`` asks for a
        full rewrite. Raises ``PersistenceUnavailable`` on failure.
        """

    @abc.abstractmethod
    def fingerprint(self) -> Optional[str]:
        """Current content marker, ``None`` when nothing is persisted yet."""

    def close(self) -> None:
        """Release any held resources."""
