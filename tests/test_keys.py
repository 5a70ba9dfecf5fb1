"""
Tests for view-key construction and direct-thread ids.
"""

import pytest

from campus_hub.store import keys


class TestViewKeys:
    """Tests for canonical view keys."""

    def test_independent_keys_are_equal(self) -> None:
        """Keys built separately from the same arguments compare and hash equal."""
        first = keys.messages("g1", "c1")
        second = keys.messages("g1", "c1")
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_canonical_string_form(self) -> None:
        """Parameters join with colons and an absent filter renders as a wildcard."""
        assert str(keys.messages("g1", "c1")) == "messages:g1:c1"
        assert str(keys.broadcasts()) == "broadcasts:*"
        assert str(keys.groups()) == "groups"
        assert str(keys.leaderboard(10)) == "leaderboard:10"

    def test_distinct_parameters_differ(self) -> None:
        """Keys of the same family with different parameters are distinct."""
        assert keys.account("a") != keys.account("b")
        assert keys.broadcasts("g1") != keys.broadcasts()

    def test_unknown_family_rejected(self) -> None:
        """A key for an unknown family is a programming error."""
        with pytest.raises(ValueError):
            keys.validate(keys.ViewKey("nonsense", ()))

    def test_wrong_arity_rejected(self) -> None:
        """A key with the wrong number of parameters is rejected."""
        with pytest.raises(ValueError):
            keys.validate(keys.ViewKey("messages", ("g1",)))

    def test_empty_parameter_rejected(self) -> None:
        """Empty-string parameters never name a projection."""
        with pytest.raises(ValueError):
            keys.account("")

    @pytest.mark.parametrize("limit", [0, -3, True, "10"])
    def test_leaderboard_limit_must_be_positive_int(self, limit) -> None:
        """Leaderboard limits are positive integers."""
        with pytest.raises(ValueError):
            keys.leaderboard(limit)


class TestDirectThreads:
    """Tests for direct-thread identifiers."""

    def test_thread_id_is_order_independent(self) -> None:
        """Both participants derive the same thread id."""
        assert keys.direct_thread_id("bob", "alice") == "alice_bob"
        assert keys.direct_thread_id("alice", "bob") == "alice_bob"

    def test_direct_messages_key_uses_reserved_container(self) -> None:
        """Direct threads live in the reserved direct container."""
        assert keys.direct_messages("bob", "alice") == keys.messages("direct", "alice_bob")

    def test_separator_in_id_rejected(self) -> None:
        """Ids containing the separator cannot form an unambiguous thread id."""
        with pytest.raises(ValueError):
            keys.direct_thread_id("al_ice", "bob")

    def test_same_account_rejected(self) -> None:
        """A thread needs two distinct accounts."""
        with pytest.raises(ValueError):
            keys.direct_thread_id("alice", "alice")

    def test_participants_round_trip(self) -> None:
        """A canonical thread id splits back into its participants."""
        assert keys.thread_participants("alice_bob") == ("alice", "bob")

    @pytest.mark.parametrize("thread_id", ["alice", "bob_alice", "a_b_c", "_bob"])
    def test_non_canonical_threads(self, thread_id: str) -> None:
        """Non-canonical thread ids have no participants."""
        assert keys.thread_participants(thread_id) is None
