"""
Tests for snapshots, the entity store and units of work.
"""

from datetime import datetime, timezone

import pytest

from campus_hub.core.errors import ErrorKind, StoreRuleViolation
from campus_hub.schemas import Account, Group, Message
from campus_hub.store.entity_store import Change, EntityStore, Snapshot, kind_of
from campus_hub.store.mutations import UnitOfWork, mutation

NOW = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def make_account(account_id: str, points: int = 0) -> Account:
    return Account(id=account_id, email=f"{account_id}@campus.edu", display_name=account_id, points=points)


class TestKindResolution:
    """Tests for kind lookup."""

    def test_record_class_and_name_resolve_alike(self) -> None:
        assert kind_of(Account) == kind_of("accounts") == "accounts"

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(KeyError):
            kind_of("widgets")


class TestEntityStore:
    """Tests for the in-memory table."""

    def test_put_and_get(self) -> None:
        """A put record is readable by kind and id."""
        entities = EntityStore()
        entities.put(make_account("alice"))
        assert entities.get(Account, "alice").display_name == "alice"
        assert entities.get(Account, "missing") is None

    def test_put_replaces_wholesale(self) -> None:
        """A second put replaces the record rather than merging it."""
        entities = EntityStore()
        entities.put(make_account("alice", points=10))
        entities.put(make_account("alice"))
        assert entities.get(Account, "alice").points == 0
        assert len(entities.get_all(Account)) == 1

    def test_patch_absent_is_noop(self) -> None:
        """Patching a missing record changes nothing."""
        entities = EntityStore()
        before = entities.snapshot
        assert entities.patch(Account, "ghost", lambda record: record) is None
        assert entities.snapshot is before

    def test_patch_applies_updater(self) -> None:
        entities = EntityStore()
        entities.put(make_account("alice"))
        entities.patch(Account, "alice", lambda record: record.model_copy(update={"points": 5}))
        assert entities.get(Account, "alice").points == 5

    def test_delete(self) -> None:
        entities = EntityStore()
        entities.put(make_account("alice"))
        removed = entities.delete(Account, "alice")
        assert removed.id == "alice"
        assert entities.get(Account, "alice") is None

    def test_held_snapshot_is_unaffected_by_writes(self) -> None:
        """A reader holding a snapshot keeps seeing the state it started with."""
        entities = EntityStore()
        entities.put(make_account("alice"))
        held = entities.snapshot
        entities.put(make_account("bob"))
        assert held.count(Account) == 1
        assert entities.snapshot.count(Account) == 2

    def test_snapshot_tables_are_read_only(self) -> None:
        snapshot = Snapshot.empty().apply([Change("accounts", "alice", None, make_account("alice"))])
        with pytest.raises(TypeError):
            snapshot.table(Account)["bob"] = make_account("bob")


class TestSnapshot:
    """Tests for snapshot construction."""

    def test_from_tables_recovers_message_sequence(self) -> None:
        """The next message sequence continues after the highest loaded one."""
        messages = {
            f"m{index}": Message(
                id=f"m{index}",
                container_id="g1",
                channel_id="c1",
                sender_id="alice",
                body="hi",
                created_at=NOW,
                sequence=index,
            )
            for index in (3, 7, 5)
        }
        assert Snapshot.from_tables({"messages": messages}).sequence == 7

    def test_unchanged_tables_are_shared(self) -> None:
        """Applying a change copies only the touched table."""
        base = Snapshot.empty()
        after = base.apply([Change("accounts", "alice", None, make_account("alice"))])
        assert after.table(Group) is base.table(Group)
        assert after.table(Account) is not base.table(Account)


class TestUnitOfWork:
    """Tests for staged writes."""

    def test_reads_see_staged_writes_first(self) -> None:
        base = Snapshot.empty().apply([Change("accounts", "alice", None, make_account("alice"))])
        uow = UnitOfWork(base, clock=lambda: NOW)
        uow.update(Account, "alice", points=40)
        assert uow.get(Account, "alice").points == 40
        assert base.get(Account, "alice").points == 0

    def test_get_all_merges_staged_and_deleted(self) -> None:
        base = Snapshot.empty().apply(
            [
                Change("accounts", "alice", None, make_account("alice")),
                Change("accounts", "bob", None, make_account("bob")),
            ]
        )
        uow = UnitOfWork(base, clock=lambda: NOW)
        uow.delete(Account, "alice")
        uow.put(make_account("carol"))
        assert sorted(account.id for account in uow.get_all(Account)) == ["bob", "carol"]

    def test_update_revalidates_label_maps(self) -> None:
        group = Group(id="g1", name="Chess", owner_id="alice", members=frozenset({"alice", "bob"}), created_at=NOW)
        base = Snapshot.empty().apply([Change("groups", "g1", None, group)])
        uow = UnitOfWork(base, clock=lambda: NOW)
        updated = uow.update(Group, "g1", role_assignments={"bob": "Captain"})
        assert updated.role_assignments == {"bob": "Captain"}
        with pytest.raises(TypeError):
            updated.role_assignments["alice"] = "Owner"

    def test_require_missing_raises_not_found(self) -> None:
        uow = UnitOfWork(Snapshot.empty(), clock=lambda: NOW)
        with pytest.raises(StoreRuleViolation) as excinfo:
            uow.require(Account, "ghost")
        assert excinfo.value.kind is ErrorKind.NOT_FOUND
        assert "Account ghost" in excinfo.value.detail

    def test_changes_skip_identical_rewrites(self) -> None:
        """Writing back an equal record is not a change."""
        base = Snapshot.empty().apply([Change("accounts", "alice", None, make_account("alice"))])
        uow = UnitOfWork(base, clock=lambda: NOW)
        uow.put(make_account("alice"))
        assert uow.changes() == []

    def test_now_is_stable_within_a_unit(self) -> None:
        readings = iter([NOW, datetime(2030, 1, 1, tzinfo=timezone.utc)])
        uow = UnitOfWork(Snapshot.empty(), clock=lambda: next(readings))
        assert uow.now() == uow.now() == NOW

    def test_sequence_advances_from_base(self) -> None:
        base = Snapshot({}, sequence=4)
        uow = UnitOfWork(base, clock=lambda: NOW)
        assert uow.next_sequence() == 5
        assert uow.next_sequence() == 6
        assert base.sequence == 4


class TestMutationRunner:
    """Tests for running decorated operations against a store."""

    def test_operation_keywords_named_like_runner_arguments(self, store) -> None:
        @mutation
        def enroll(uow: UnitOfWork, *, name: str, operation: str) -> str:
            return uow.put(make_account(name)).id + operation

        result = enroll(store, name="alice", operation="!")
        assert result.ok and result.value == "alice!"
        assert store.get(Account, "alice").id == "alice"
