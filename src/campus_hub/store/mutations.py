"""Units of work and typed mutation results."""

from __future__ import annotations

import functools
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from ..core.errors import ErrorKind, not_found
from ..schemas import Record
from .entity_store import Change, KindLike, Snapshot, kind_of

if TYPE_CHECKING:
    from .engine import CampusStore

R = TypeVar("R", bound=Record)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def new_entity_id() -> str:
    return uuid.uuid4().hex


class UnitOfWork:
    """Stages the writes of one mutation over a fixed base snapshot.

    Reads see the staged state first, then the base. Nothing reaches the
    entity store until the engine commits :meth:`changes`; discarding the
    unit of work leaves the store exactly as it was.
    """

    def __init__(self, base: Snapshot, *, clock: Clock, id_factory: IdFactory = new_entity_id) -> None:
        self._base = base
        self._clock = clock
        self._id_factory = id_factory
        self._staged: dict[tuple[str, str], Optional[Record]] = {}
        self._sequence = base.sequence
        self._now: Optional[datetime] = None

    @property
    def sequence(self) -> int:
        return self._sequence

    def now(self) -> datetime:
        """Timestamp of this unit of work; stable across calls."""

        if self._now is None:
            self._now = self._clock()
        return self._now

    def new_id(self) -> str:
        return self._id_factory()

    def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def get(self, kind: type[R], entity_id: str) -> Optional[R]:
        name = kind_of(kind)
        if (name, entity_id) in self._staged:
            return self._staged[(name, entity_id)]
        return self._base.get(name, entity_id)

    def require(self, kind: type[R], entity_id: str) -> R:
        record = self.get(kind, entity_id)
        if record is None:
            label = kind.__name__ if isinstance(kind, type) else kind
            raise not_found(label, entity_id)
        return record

    def get_all(self, kind: type[R]) -> list[R]:
        name = kind_of(kind)
        merged = dict(self._base.table(name))
        for (staged_kind, entity_id), record in self._staged.items():
            if staged_kind != name:
                continue
            if record is None:
                merged.pop(entity_id, None)
            else:
                merged[entity_id] = record
        return list(merged.values())

    def put(self, record: R) -> R:
        self._staged[(kind_of(type(record)), record.id)] = record
        return record

    def patch(self, kind: type[R], entity_id: str, updater: Callable[[R], R]) -> R:
        """Read-modify-write one record; raises ``NotFound`` when absent."""

        return self.put(updater(self.require(kind, entity_id)))

    def update(self, kind: type[R], entity_id: str, **fields: Any) -> R:
        """Replace ``fields`` on one record; the new record is re-validated."""

        return self.patch(kind, entity_id, lambda record: kind.model_validate({**dict(record), **fields}))

    def delete(self, kind: KindLike, entity_id: str) -> Record:
        name = kind_of(kind)
        record = self.require(kind, entity_id)
        self._staged[(name, entity_id)] = None
        return record

    def changes(self) -> list[Change]:
        """Staged writes that actually differ from the base snapshot."""

        result = []
        for (kind, entity_id), after in self._staged.items():
            before = self._base.get(kind, entity_id)
            if before == after:
                continue
            result.append(Change(kind, entity_id, before, after))
        return result


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a mutation: a value on success or a typed failure.

    ``changed`` is ``False`` for idempotent repeats that left the store as
    it was.
    """

    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    detail: str = ""
    changed: bool = False

    @classmethod
    def success(cls, value: Any = None, *, changed: bool = True) -> "MutationResult":
        return cls(ok=True, value=value, changed=changed)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str) -> "MutationResult":
        return cls(ok=False, error=error, detail=detail)

    @property
    def status_code(self) -> int:
        return 200 if self.ok else self.error.status_code

    def __bool__(self) -> bool:
        return self.ok


def mutation(operation: Callable[..., Any]) -> Callable[..., MutationResult]:
    """Expose ``operation(uow, **params)`` as ``op(store, **params)``.

    The store runs the operation under its single-writer lock and turns
    rule violations into a failed :class:`MutationResult`.
    """

    @functools.wraps(operation)
    def runner(store: "CampusStore", **params: Any) -> MutationResult:
        return store.run(operation.__name__, operation, **params)

    runner.operation = operation
    return runner
