"""
Tests for subscriptions, replay and invalidation.
"""

import logging

from campus_hub.services import account_service, gamification_service, group_service
from campus_hub.store import keys
from campus_hub.store.registry import SubscriptionRegistry


class CountingProjector:
    """Projector returning a value that changes every time it is asked."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, key):
        self.calls += 1
        return f"{key}#{self.calls}"


class TestRegistry:
    """Tests for the registry in isolation."""

    def test_subscribe_replays_current_value(self) -> None:
        registry = SubscriptionRegistry(CountingProjector())
        received = []
        registry.subscribe(keys.groups(), received.append)
        assert received == ["groups#1"]

    def test_invalidate_without_subscribers_does_no_work(self) -> None:
        projector = CountingProjector()
        registry = SubscriptionRegistry(projector)
        assert registry.invalidate(keys.groups()) == 0
        assert projector.calls == 0

    def test_invalidate_projects_once_for_all_callbacks(self) -> None:
        projector = CountingProjector()
        registry = SubscriptionRegistry(projector)
        first, second = [], []
        registry.subscribe(keys.groups(), first.append)
        registry.subscribe(keys.groups(), second.append)
        calls_before = projector.calls
        assert registry.invalidate(keys.groups()) == 2
        assert projector.calls == calls_before + 1
        assert first[-1] == second[-1]

    def test_equal_keys_share_a_bucket(self) -> None:
        """Keys built independently address the same subscribers."""
        registry = SubscriptionRegistry(CountingProjector())
        received = []
        registry.subscribe(keys.messages("g1", "c1"), received.append)
        registry.invalidate(keys.messages("g1", "c1"))
        assert len(received) == 2

    def test_unsubscribe_removes_empty_bucket(self) -> None:
        """Dropping the last callback leaves nothing behind."""
        registry = SubscriptionRegistry(CountingProjector())
        subscription = registry.subscribe(keys.account("alice"), lambda value: None)
        assert registry.active_keys() == [keys.account("alice")]
        subscription.unsubscribe()
        assert registry.active_keys() == []
        assert registry.subscriber_count() == 0

    def test_unsubscribe_is_idempotent_and_precise(self) -> None:
        registry = SubscriptionRegistry(CountingProjector())
        kept = []
        dropped = registry.subscribe(keys.groups(), lambda value: None)
        registry.subscribe(keys.groups(), kept.append)
        dropped()
        dropped()
        assert not dropped.active
        assert registry.subscriber_count(keys.groups()) == 1
        registry.invalidate(keys.groups())
        assert len(kept) == 2

    def test_family_invalidation(self) -> None:
        registry = SubscriptionRegistry(CountingProjector())
        received = []
        registry.subscribe(keys.leaderboard(5), received.append)
        registry.subscribe(keys.leaderboard(10), received.append)
        registry.subscribe(keys.groups(), received.append)
        assert registry.invalidate_family("leaderboard") == 2

    def test_failing_callback_does_not_block_others(self, caplog) -> None:
        registry = SubscriptionRegistry(CountingProjector())
        received = []

        def broken(value):
            raise RuntimeError("boom")

        registry.subscribe(keys.groups(), broken)
        registry.subscribe(keys.groups(), received.append)
        with caplog.at_level(logging.ERROR):
            registry.invalidate(keys.groups())
        assert received == ["groups#2", "groups#3"]
        assert "subscriber callback" in caplog.text


class TestStoreSubscriptions:
    """Tests for notifications driven by mutations."""

    def test_replay_matches_one_shot_query(self, store, sign_in) -> None:
        owner = sign_in(store, "alice")
        group_service.create_group(store, owner_id=owner.id, name="Robotics")
        received = []
        store.subscribe(keys.groups(), received.append)
        assert received == [store.query(keys.groups())]

    def test_mutation_notifies_affected_view(self, store, sign_in) -> None:
        sign_in(store, "alice")
        received = []
        store.subscribe(keys.account("alice"), received.append)
        gamification_service.award_points(store, account_id="alice", amount=25, reason="Workshop host")
        assert [account.points for account in received] == [0, 25]

    def test_unrelated_views_are_not_notified(self, store, sign_in) -> None:
        sign_in(store, "alice")
        sign_in(store, "bob")
        received = []
        store.subscribe(keys.account("bob"), received.append)
        gamification_service.award_points(store, account_id="alice", amount=5, reason="Quiz")
        assert len(received) == 1

    def test_noop_mutation_does_not_notify(self, store, sign_in) -> None:
        sign_in(store, "alice")
        received = []
        store.subscribe(keys.account("alice"), received.append)
        result = account_service.update_profile(store, account_id="alice")
        assert result.ok and not result.changed
        assert len(received) == 1

    def test_failed_mutation_does_not_notify(self, store, sign_in) -> None:
        sign_in(store, "alice")
        received = []
        store.subscribe(keys.account("alice"), received.append)
        gamification_service.award_points(store, account_id="alice", amount=-5, reason="bad")
        assert len(received) == 1

    def test_callback_may_mutate(self, store, sign_in) -> None:
        """A subscriber can issue a mutation from inside its callback."""
        sign_in(store, "alice")
        sign_in(store, "bob")
        seen = []

        def on_alice(account):
            seen.append(account.points)
            if account.points == 10:
                gamification_service.award_points(store, account_id="bob", amount=1, reason="Relay")

        store.subscribe(keys.account("alice"), on_alice)
        gamification_service.award_points(store, account_id="alice", amount=10, reason="Start")
        assert seen == [0, 10]
        assert store.get("accounts", "bob").points == 1

    def test_shutdown_drops_subscriptions(self, store, sign_in) -> None:
        sign_in(store, "alice")
        store.subscribe(keys.account("alice"), lambda value: None)
        store.shutdown()
        assert store.registry.subscriber_count() == 0
