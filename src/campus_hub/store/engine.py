"""The campus store: one entity store, one medium, one subscription registry."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Literal, Optional

from ..core.config import Settings
from ..core.errors import ErrorKind, PersistenceUnavailable, StoreRuleViolation
from ..schemas import Record
from ..utils.datetime import utc_now
from .entity_store import EntityStore, KindLike, Snapshot
from .keys import ViewKey
from .mutations import Clock, IdFactory, MutationResult, UnitOfWork, new_entity_id
from .persistence import JsonFilePersistence, PersistenceAdapter, SqlPersistence
from .projections import Invalidation, ProjectionOptions, affected_views, project
from .registry import Callback, Subscription, SubscriptionRegistry

logger = logging.getLogger(__name__)

DegradedWrites = Literal["reject", "accept"]


class CampusStore:
    """Reactive document cache with a single-writer mutation path.

    Lifecycle: construct, :meth:`init` to load persisted state, use, then
    :meth:`shutdown` to flush pending state and drop every subscription.

    Durability policy when the medium cannot be written:

    * ``reject`` - the mutation fails with ``PERSISTENCE_UNAVAILABLE`` and the
      in-memory state is unchanged.
    * ``accept`` - the mutation is kept in memory, the store is marked dirty
      and the next successful save writes the full state.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        *,
        degraded_writes: DegradedWrites = "reject",
        options: Optional[ProjectionOptions] = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_entity_id,
        allowed_email_domain: Optional[str] = None,
    ) -> None:
        if degraded_writes not in ("reject", "accept"):
            raise ValueError(f"unknown degraded write policy {degraded_writes!r}")
        self.adapter = adapter
        self.degraded_writes = degraded_writes
        self.options = options or ProjectionOptions()
        self.allowed_email_domain = allowed_email_domain
        self._clock = clock
        self._id_factory = id_factory
        self._entities = EntityStore()
        self._registry = SubscriptionRegistry(self.query)
        self._write_lock = threading.RLock()
        self._fingerprint: Optional[str] = None
        self._dirty = False
        self._started = False

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CampusStore":
        """Build a store whose medium and policies come from ``settings``."""

        if settings.persistence_backend == "sql":
            adapter: PersistenceAdapter = SqlPersistence(settings.database_url)
        else:
            adapter = JsonFilePersistence(settings.data_path)
        options = ProjectionOptions(
            mentor_points_threshold=settings.mentor_points_threshold,
            leaderboard_limit=settings.leaderboard_limit,
        )
        return cls(
            adapter,
            degraded_writes=settings.degraded_writes,
            options=options,
            allowed_email_domain=settings.allowed_email_domain,
            **kwargs,
        )

    # -- lifecycle -------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    @property
    def dirty(self) -> bool:
        return self._dirty

    def init(self) -> "CampusStore":
        with self._write_lock:
            self._load()
            self._started = True
        logger.info("campus store ready: %d records via %s medium", self.snapshot.count(), self.adapter.name)
        return self

    def shutdown(self) -> None:
        with self._write_lock:
            if self._dirty and not self.flush():
                logger.error("shutting down with unsaved changes; durable medium unavailable")
            self._started = False
        self._registry.clear()
        self.adapter.close()
        logger.info("campus store shut down")

    def flush(self) -> bool:
        """Write the full state if an earlier save failed; ``True`` when clean."""

        with self._write_lock:
            if not self._dirty:
                return True
            try:
                self._fingerprint = self.adapter.save(self.snapshot, None)
            except PersistenceUnavailable as exc:
                logger.warning("flush failed: %s", exc)
                return False
            self._dirty = False
            logger.info("flushed pending state to %s medium", self.adapter.name)
            return True

    def sync_external_changes(self) -> bool:
        """Reload when another process changed the medium; ``True`` if reloaded.

        Every active view is re-notified after a reload. Local changes that
        are still waiting to be written take precedence: they are flushed
        instead of being discarded by a reload.
        """

        with self._write_lock:
            try:
                current = self.adapter.fingerprint()
            except PersistenceUnavailable as exc:
                logger.warning("cannot check medium for external changes: %s", exc)
                return False
            if current == self._fingerprint:
                return False
            if self._dirty:
                logger.warning("medium changed while local changes are unsaved; keeping local state")
                self.flush()
                return False
            self._load()
        notified = self._registry.invalidate_all()
        logger.info("reloaded after external change; re-notified %d subscribers", notified)
        return True

    def _load(self) -> None:
        try:
            tables, fingerprint = self.adapter.load_state()
        except PersistenceUnavailable as exc:
            logger.error("durable medium unreadable, starting empty: %s", exc)
            tables, fingerprint = {}, None
        self._entities.replace(Snapshot.from_tables(tables))
        self._fingerprint = fingerprint
        self._dirty = False

    # -- reads -----------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._entities.snapshot

    def get(self, kind: KindLike, entity_id: str) -> Optional[Record]:
        return self._entities.get(kind, entity_id)

    def get_all(self, kind: KindLike) -> list[Record]:
        return self._entities.get_all(kind)

    def query(self, key: ViewKey) -> Any:
        """One-shot read of a view against the current snapshot."""

        return project(self.snapshot, key, self.options)

    def subscribe(self, key: ViewKey, callback: Callback) -> Subscription:
        """Register ``callback`` and replay the current projection to it."""

        return self._registry.subscribe(key, callback)

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    # -- writes ----------------------------------------------------------

    def run(self, name: str, operation: Callable[..., Any], /, **params: Any) -> MutationResult:
        """Apply ``operation`` as one atomic unit and notify affected views."""

        with self._write_lock:
            base = self.snapshot
            uow = UnitOfWork(base, clock=self._clock, id_factory=self._id_factory)
            try:
                value = operation(uow, **params)
            except StoreRuleViolation as exc:
                logger.info("%s rejected (%s): %s", name, exc.kind.value, exc.detail)
                return MutationResult.failure(exc.kind, exc.detail)

            changes = uow.changes()
            if not changes:
                return MutationResult.success(value, changed=False)

            candidate = base.apply(changes, sequence=uow.sequence)
            try:
                self._fingerprint = self.adapter.save(candidate, None if self._dirty else changes)
                self._dirty = False
            except PersistenceUnavailable as exc:
                if self.degraded_writes == "reject":
                    logger.error("%s not applied, durable medium unavailable: %s", name, exc)
                    return MutationResult.failure(ErrorKind.PERSISTENCE_UNAVAILABLE, str(exc))
                logger.warning("%s kept in memory only, durable medium unavailable: %s", name, exc)
                self._dirty = True

            self._entities.replace(candidate)
            invalidation = affected_views(changes)

        self._notify(invalidation)
        return MutationResult.success(value)

    def _notify(self, invalidation: Invalidation) -> None:
        for key in invalidation.keys:
            self._registry.invalidate(key)
        for family in invalidation.families:
            self._registry.invalidate_family(family)
