"""
Tests for the durable media, reloads and the degraded-write policy.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import pytest

from campus_hub.core.errors import ErrorKind, PersistenceUnavailable
from campus_hub.schemas import Account, Group
from campus_hub.services import broadcast_service, gamification_service, group_service, messaging_service
from campus_hub.store import keys
from campus_hub.store.engine import CampusStore
from campus_hub.store.entity_store import Change, Snapshot
from campus_hub.store.persistence import JsonFilePersistence, SqlPersistence, decode_records


class FlakyPersistence(JsonFilePersistence):
    """JSON medium whose saves can be made to fail on demand."""

    def __init__(self, path: Path) -> None:
        super().__init__(path)
        self.failing = False
        self.saves: list = []

    def save(self, snapshot: Snapshot, changes: Optional[Sequence[Change]] = None) -> Optional[str]:
        if self.failing:
            raise PersistenceUnavailable("disk unplugged")
        self.saves.append(changes)
        return super().save(snapshot, changes)


class RacingPersistence(JsonFilePersistence):
    """JSON medium that lets another writer replace the file right after a read."""

    def __init__(self, path: Path, replacement: bytes) -> None:
        super().__init__(path)
        self.replacement: Optional[bytes] = replacement

    def _decode(self, raw_bytes: bytes):
        tables = super()._decode(raw_bytes)
        if self.replacement is not None:
            self.path.write_bytes(self.replacement)
            self.replacement = None
        return tables


def populate(store: CampusStore, sign_in) -> str:
    """Build a small campus touching every record kind; returns the group id."""
    sign_in(store, "alice")
    sign_in(store, "bob")
    group = group_service.create_group(store, owner_id="alice", name="Astronomy Club").value
    group_service.request_join(store, group_id=group.id, account_id="bob")
    group_service.approve_join(store, group_id=group.id, account_id="bob")
    lounge = store.query(keys.channels(group.id))[0]
    messaging_service.send_message(store, container_id=group.id, channel_id=lounge.id, sender_id="bob", body="clear skies")
    messaging_service.send_direct_message(store, sender_id="alice", recipient_id="bob", body="telescope?")
    post = broadcast_service.publish_broadcast(store, group_id=group.id, author_id="alice", body="Star party").value
    broadcast_service.toggle_like(store, broadcast_id=post.id, account_id="bob")
    gamification_service.award_badge(store, account_id="alice", badge_id="b5")
    return group.id


def projections(store: CampusStore, group_id: str) -> dict:
    lounge = store.query(keys.channels(group_id))[0]
    views = [
        keys.account("alice"),
        keys.account("bob"),
        keys.group(group_id),
        keys.groups(),
        keys.channels(group_id),
        keys.messages(group_id, lounge.id),
        keys.direct_messages("alice", "bob"),
        keys.broadcasts(),
        keys.leaderboard(50),
        keys.partners("alice"),
        keys.alerts("alice"),
        keys.alerts("bob"),
        keys.recent_achievements(),
    ]
    return {str(key): store.query(key) for key in views}


class TestJsonRoundTrip:
    """Tests for the JSON file medium."""

    def test_reload_reproduces_projections(self, store, sign_in, state_path, clock) -> None:
        group_id = populate(store, sign_in)
        expected = projections(store, group_id)
        store.shutdown()

        reloaded = CampusStore(JsonFilePersistence(state_path), clock=clock).init()
        assert projections(reloaded, group_id) == expected
        assert reloaded.snapshot.sequence == store.snapshot.sequence

    def test_file_layout(self, store, sign_in, state_path) -> None:
        sign_in(store, "alice")
        payload = json.loads(state_path.read_text())
        assert payload["version"] == 1
        assert payload["kinds"]["accounts"][0]["email"] == "alice@campus.edu"

    def test_missing_file_starts_empty(self, tmp_path) -> None:
        campus = CampusStore(JsonFilePersistence(tmp_path / "absent.json")).init()
        assert campus.snapshot.count() == 0

    def test_invalid_json_starts_empty(self, tmp_path, caplog) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING):
            campus = CampusStore(JsonFilePersistence(path)).init()
        assert campus.snapshot.count() == 0
        assert "not valid JSON" in caplog.text

    def test_malformed_kind_falls_back_to_empty(self, tmp_path, caplog) -> None:
        path = tmp_path / "partial.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "kinds": {
                        "accounts": [{"id": "alice", "email": "alice@campus.edu", "display_name": "Alice"}],
                        "groups": [{"id": "g1", "name": "No owner"}],
                        "messages": "garbage",
                    },
                }
            )
        )
        with caplog.at_level(logging.WARNING):
            campus = CampusStore(JsonFilePersistence(path)).init()
        assert campus.get(Account, "alice").display_name == "Alice"
        assert campus.get_all(Group) == []
        assert "discarding malformed persisted groups" in caplog.text

    def test_decode_rejects_non_list_payloads(self) -> None:
        assert decode_records("accounts", {"id": "alice"}) == {}
        assert decode_records("accounts", None) == {}


@pytest.mark.integration
class TestSqlRoundTrip:
    """Tests for the SQLAlchemy document medium."""

    @pytest.fixture
    def database_url(self, tmp_path: Path) -> str:
        return f"sqlite:///{tmp_path / 'campus.db'}"

    def test_reload_reproduces_projections(self, database_url, sign_in, clock) -> None:
        campus = CampusStore(SqlPersistence(database_url), clock=clock).init()
        group_id = populate(campus, sign_in)
        expected = projections(campus, group_id)
        campus.shutdown()

        reloaded = CampusStore(SqlPersistence(database_url), clock=clock).init()
        assert projections(reloaded, group_id) == expected
        reloaded.shutdown()

    def test_revision_is_the_fingerprint(self, database_url, sign_in, clock) -> None:
        adapter = SqlPersistence(database_url)
        campus = CampusStore(adapter, clock=clock).init()
        assert adapter.fingerprint() is None
        sign_in(campus, "alice")
        sign_in(campus, "bob")
        assert adapter.fingerprint() == "2"
        campus.shutdown()

    def test_deleted_channel_is_removed(self, database_url, sign_in, clock) -> None:
        campus = CampusStore(SqlPersistence(database_url), clock=clock).init()
        sign_in(campus, "alice")
        group = group_service.create_group(campus, owner_id="alice", name="Film").value
        channel = messaging_service.create_channel(campus, container_id=group.id, name="editing").value
        messaging_service.remove_channel(campus, channel_id=channel.id)
        campus.shutdown()

        reloaded = CampusStore(SqlPersistence(database_url)).init()
        assert [item.name for item in reloaded.query(keys.channels(group.id))] == ["lounge"]
        reloaded.shutdown()

    def test_external_change_reloads(self, database_url, sign_in, clock) -> None:
        first = CampusStore(SqlPersistence(database_url), clock=clock).init()
        second = CampusStore(SqlPersistence(database_url), clock=clock).init()
        sign_in(first, "alice")
        assert second.sync_external_changes()
        assert second.get(Account, "alice") is not None
        first.shutdown()
        second.shutdown()


class TestExternalChanges:
    """Tests for reloading after another process wrote the medium."""

    def test_reload_notifies_every_view(self, store, sign_in, state_path, clock) -> None:
        sign_in(store, "alice")
        other = CampusStore(JsonFilePersistence(state_path), clock=clock).init()
        received = []
        other.subscribe(keys.account("alice"), received.append)

        gamification_service.award_points(store, account_id="alice", amount=30, reason="Outreach")
        assert other.sync_external_changes()
        assert [account.points for account in received] == [0, 30]

    def test_no_change_no_reload(self, store, sign_in) -> None:
        sign_in(store, "alice")
        assert not store.sync_external_changes()

    def test_own_writes_are_not_external(self, store, sign_in, state_path, clock) -> None:
        other = CampusStore(JsonFilePersistence(state_path), clock=clock).init()
        sign_in(other, "bob")
        assert store.sync_external_changes()
        assert not other.sync_external_changes()

    def test_write_during_load_is_picked_up_later(self, store, sign_in, state_path, clock) -> None:
        sign_in(store, "alice")
        older = state_path.read_bytes()
        sign_in(store, "bob")
        newer = state_path.read_bytes()
        state_path.write_bytes(older)

        other = CampusStore(RacingPersistence(state_path, newer), clock=clock).init()
        try:
            assert other.get(Account, "bob") is None
            assert other.sync_external_changes()
            assert other.get(Account, "bob").id == "bob"
        finally:
            other.shutdown()


class TestDegradedWrites:
    """Tests for mutations while the medium cannot be written."""

    @pytest.fixture
    def adapter(self, state_path: Path) -> FlakyPersistence:
        return FlakyPersistence(state_path)

    def test_reject_policy_leaves_store_unchanged(self, adapter, sign_in, clock) -> None:
        campus = CampusStore(adapter, degraded_writes="reject", clock=clock).init()
        sign_in(campus, "alice")
        received = []
        campus.subscribe(keys.account("alice"), received.append)
        before = campus.snapshot

        adapter.failing = True
        result = gamification_service.award_points(campus, account_id="alice", amount=10, reason="Lost")
        assert result.error is ErrorKind.PERSISTENCE_UNAVAILABLE
        assert result.status_code == 503
        assert campus.snapshot is before
        assert campus.get(Account, "alice").points == 0
        assert len(received) == 1
        assert not campus.dirty

    def test_multi_record_failure_is_atomic(self, adapter, sign_in, clock) -> None:
        """A failed save never leaves half of a multi-record mutation behind."""
        campus = CampusStore(adapter, clock=clock).init()
        sign_in(campus, "alice")
        adapter.failing = True
        result = group_service.create_group(campus, owner_id="alice", name="Ghost Club")
        assert not result
        assert campus.get_all(Group) == []
        assert campus.get(Account, "alice").joined_group_ids == frozenset()
        assert campus.query(keys.alerts("alice")) == []

    def test_accept_policy_keeps_change_and_flushes_later(self, adapter, sign_in, state_path, clock) -> None:
        campus = CampusStore(adapter, degraded_writes="accept", clock=clock).init()
        sign_in(campus, "alice")
        received = []
        campus.subscribe(keys.account("alice"), received.append)

        adapter.failing = True
        result = gamification_service.award_points(campus, account_id="alice", amount=10, reason="Offline")
        assert result.ok
        assert campus.dirty
        assert [account.points for account in received] == [0, 10]
        assert not campus.flush()

        adapter.failing = False
        sign_in(campus, "bob")
        assert adapter.saves[-1] is None
        assert not campus.dirty

        reloaded = CampusStore(JsonFilePersistence(state_path)).init()
        assert reloaded.get(Account, "alice").points == 10
        assert reloaded.get(Account, "bob") is not None

    def test_shutdown_flushes_pending_state(self, adapter, sign_in, state_path, clock) -> None:
        campus = CampusStore(adapter, degraded_writes="accept", clock=clock).init()
        adapter.failing = True
        sign_in(campus, "alice")
        adapter.failing = False
        campus.shutdown()
        assert CampusStore(JsonFilePersistence(state_path)).init().get(Account, "alice") is not None

    def test_dirty_state_wins_over_external_change(self, adapter, sign_in, state_path, clock) -> None:
        campus = CampusStore(adapter, degraded_writes="accept", clock=clock).init()
        adapter.failing = True
        sign_in(campus, "alice")
        adapter.failing = False

        state_path.write_text(json.dumps({"version": 1, "kinds": {}}))
        assert not campus.sync_external_changes()
        assert campus.get(Account, "alice") is not None
        assert not campus.dirty

    def test_unknown_policy_rejected(self, adapter) -> None:
        with pytest.raises(ValueError):
            CampusStore(adapter, degraded_writes="ignore")
