"""SQLAlchemy-backed document medium."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...core.database import create_db_engine, create_session_factory
from ...core.errors import PersistenceUnavailable
from ...models import StoredDocument, StoreRevision
from ...schemas import RECORD_TYPES
from ...utils.datetime import utc_now
from ..entity_store import Change, Snapshot
from .base import LoadedTables, PersistenceAdapter, decode_records, encode_record

logger = logging.getLogger(__name__)

_REVISION_ROW = 1


class SqlPersistence(PersistenceAdapter):
    """Stores records as JSON documents keyed by (kind, id).

    Saves write only the changed documents, in one transaction that also bumps
    a single-row revision counter. The counter value is the fingerprint.
    """

    name = "sql"

    def __init__(self, database_url: Optional[str] = None, *, engine: Optional[Engine] = None) -> None:
        if engine is None:
            if database_url is None:
                raise ValueError("SqlPersistence needs a database URL or an engine")
            engine = create_db_engine(database_url)
        self._engine = engine
        try:
            self._session_factory: sessionmaker = create_session_factory(engine)
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"cannot prepare document tables: {exc}") from exc

    def load_all(self) -> LoadedTables:
        return self.load_state()[0]

    def load_state(self) -> tuple[LoadedTables, Optional[str]]:
        """Read the revision, then the documents, in one session.

        A write landing between the two reads leaves a stale revision behind,
        so the next sync reloads instead of missing the write.
        """

        raw: dict[str, list[Any]] = defaultdict(list)
        try:
            with self._session_factory() as session, session.begin():
                row = session.get(StoreRevision, _REVISION_ROW)
                fingerprint = None if row is None else str(row.revision)
                for document in session.execute(select(StoredDocument)).scalars():
                    raw[document.kind].append(document.payload)
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"cannot read documents: {exc}") from exc

        unknown = set(raw) - set(RECORD_TYPES)
        if unknown:
            logger.warning("ignoring documents of unknown kinds: %s", sorted(unknown))
        return {kind: decode_records(kind, raw.get(kind)) for kind in RECORD_TYPES}, fingerprint

    def save(self, snapshot: Snapshot, changes: Optional[Sequence[Change]] = None) -> Optional[str]:
        now = utc_now()
        try:
            with self._session_factory() as session, session.begin():
                if changes is None:
                    session.execute(delete(StoredDocument))
                    for kind in RECORD_TYPES:
                        for record in snapshot.get_all(kind):
                            session.add(self._document(kind, record.id, encode_record(record), now))
                else:
                    for change in changes:
                        if change.after is None:
                            session.execute(
                                delete(StoredDocument).where(
                                    StoredDocument.kind == change.kind,
                                    StoredDocument.entity_id == change.entity_id,
                                )
                            )
                        else:
                            session.merge(
                                self._document(change.kind, change.entity_id, encode_record(change.after), now)
                            )
                revision = self._bump_revision(session)
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"cannot write documents: {exc}") from exc
        return str(revision)

    def fingerprint(self) -> Optional[str]:
        try:
            with self._session_factory() as session:
                row = session.get(StoreRevision, _REVISION_ROW)
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"cannot read revision: {exc}") from exc
        return None if row is None else str(row.revision)

    def close(self) -> None:
        self._engine.dispose()

    @staticmethod
    def _document(kind: str, entity_id: str, payload: dict, now) -> StoredDocument:
        return StoredDocument(kind=kind, entity_id=entity_id, payload=payload, updated_at=now)

    @staticmethod
    def _bump_revision(session: Session) -> int:
        row = session.get(StoreRevision, _REVISION_ROW, with_for_update=True)
        if row is None:
            row = StoreRevision(revision_id=_REVISION_ROW, revision=0)
            session.add(row)
        row.revision += 1
        row.updated_at = utc_now()
        session.flush()
        return row.revision
