"""Normalized in-memory table of every entity record."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from ..schemas import RECORD_TYPES, Message, Record

KindLike = Union[str, type[Record]]


def kind_of(kind: KindLike) -> str:
    """Resolve a record class or kind name to a registered kind name."""

    name = kind if isinstance(kind, str) else kind.kind
    if name not in RECORD_TYPES:
        raise KeyError(f"unknown entity kind {name!r}")
    return name


def _freeze(table: Mapping[str, Record]) -> Mapping[str, Record]:
    if isinstance(table, MappingProxyType):
        return table
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class Change:
    """One record as it was before and after a unit of work.

    ``before`` is ``None`` for a created record, ``after`` for a deleted one.
    """

    kind: str
    entity_id: str
    before: Optional[Record]
    after: Optional[Record]


class Snapshot:
    """Immutable state of every table at one instant.

    ``sequence`` is the last insertion sequence handed to a message.
    """

    __slots__ = ("_tables", "sequence")

    def __init__(self, tables: Mapping[str, Mapping[str, Record]], sequence: int = 0) -> None:
        self._tables = MappingProxyType({kind: _freeze(tables.get(kind, {})) for kind in RECORD_TYPES})
        self.sequence = sequence

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls({})

    @classmethod
    def from_tables(cls, tables: Mapping[str, Mapping[str, Record]]) -> "Snapshot":
        """Build a snapshot from loaded tables, recovering the message sequence."""

        loaded = tables.get(Message.kind, {})
        sequence = max((message.sequence for message in loaded.values()), default=0)
        return cls(tables, sequence=sequence)

    def get(self, kind: KindLike, entity_id: str) -> Optional[Record]:
        return self._tables[kind_of(kind)].get(entity_id)

    def get_all(self, kind: KindLike) -> list[Record]:
        return list(self._tables[kind_of(kind)].values())

    def table(self, kind: KindLike) -> Mapping[str, Record]:
        return self._tables[kind_of(kind)]

    def count(self, kind: Optional[KindLike] = None) -> int:
        if kind is not None:
            return len(self._tables[kind_of(kind)])
        return sum(len(table) for table in self._tables.values())

    def tables(self) -> dict[str, dict[str, Record]]:
        """Return a shallow, mutable copy of every table."""

        return {kind: dict(table) for kind, table in self._tables.items()}

    def apply(self, changes: Iterable[Change], sequence: Optional[int] = None) -> "Snapshot":
        """Return a new snapshot with ``changes`` applied; ``self`` is untouched."""

        tables = {kind: self._tables[kind] for kind in RECORD_TYPES}
        copied: set[str] = set()
        for change in changes:
            if change.kind not in copied:
                tables[change.kind] = dict(tables[change.kind])
                copied.add(change.kind)
            if change.after is None:
                tables[change.kind].pop(change.entity_id, None)
            else:
                tables[change.kind][change.entity_id] = change.after
        return Snapshot(tables, sequence=self.sequence if sequence is None else sequence)


class EntityStore:
    """Single source of truth for reads.

    Writes build a new :class:`Snapshot` and swap it in with one reference
    assignment, so a reader holding a snapshot never observes a partially
    applied write. Callers serialize writes; the store does not lock.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        self._snapshot = snapshot or Snapshot.empty()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def get(self, kind: KindLike, entity_id: str) -> Optional[Record]:
        return self._snapshot.get(kind, entity_id)

    def get_all(self, kind: KindLike) -> list[Record]:
        return self._snapshot.get_all(kind)

    def put(self, record: Record) -> Record:
        """Insert or wholesale replace ``record``."""

        kind = kind_of(type(record))
        before = self._snapshot.get(kind, record.id)
        self.apply([Change(kind, record.id, before, record)])
        return record

    def patch(self, kind: KindLike, entity_id: str, updater: Callable[[Record], Record]) -> Optional[Record]:
        """Replace one record with ``updater(record)``; no-op when absent."""

        kind = kind_of(kind)
        current = self._snapshot.get(kind, entity_id)
        if current is None:
            return None
        updated = updater(current)
        self.apply([Change(kind, entity_id, current, updated)])
        return updated

    def delete(self, kind: KindLike, entity_id: str) -> Optional[Record]:
        kind = kind_of(kind)
        current = self._snapshot.get(kind, entity_id)
        if current is not None:
            self.apply([Change(kind, entity_id, current, None)])
        return current

    def apply(self, changes: Sequence[Change], sequence: Optional[int] = None) -> Snapshot:
        self._snapshot = self._snapshot.apply(changes, sequence=sequence)
        return self._snapshot

    def replace(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
