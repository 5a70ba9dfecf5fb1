"""
Tests for mission proposals and their review.
"""

from datetime import date

import pytest

from campus_hub.core.errors import ErrorKind
from campus_hub.schemas import Mission
from campus_hub.services import group_service, mission_service
from campus_hub.store import keys


@pytest.fixture
def group_id(store, sign_in) -> str:
    sign_in(store, "alice")
    sign_in(store, "bob")
    return group_service.create_group(store, owner_id="alice", name="Coding Club").value.id


def propose(store, group_id: str, title: str, when: date) -> Mission:
    result = mission_service.propose_mission(
        store,
        group_id=group_id,
        proposer_id="bob",
        title=title,
        date=when,
        mission_kind="hackathon",
    )
    assert result.ok, result.detail
    return result.value


class TestProposeMission:
    """Tests for proposals."""

    def test_proposal_is_pending(self, store, group_id) -> None:
        mission = propose(store, group_id, "Build-It Hackathon", date(2026, 3, 14))
        assert mission.approval_status == "pending"
        assert mission.proposer_name == "Bob"
        assert store.query(keys.pending_missions(group_id)) == [mission]
        assert store.query(keys.approved_missions()) == []

    def test_unknown_kind_rejected(self, store, group_id) -> None:
        result = mission_service.propose_mission(
            store,
            group_id=group_id,
            proposer_id="bob",
            title="Mystery",
            date=date(2026, 3, 14),
            mission_kind="party",
        )
        assert result.error is ErrorKind.INVALID_ARGUMENT

    def test_unknown_group(self, store, group_id) -> None:
        result = mission_service.propose_mission(
            store, group_id="missing", proposer_id="bob", title="Lost", date=date(2026, 3, 14)
        )
        assert result.error is ErrorKind.NOT_FOUND


class TestReviewMission:
    """Tests for approval and rejection."""

    def test_approve_sets_highlight_and_alerts_proposer(self, store, group_id) -> None:
        mission = propose(store, group_id, "Build-It Hackathon", date(2026, 3, 14))
        approved = mission_service.approve_mission(store, mission_id=mission.id, highlight="48 hours of shipping").value
        assert approved.approval_status == "approved"
        assert approved.highlight == "48 hours of shipping"
        assert store.query(keys.alerts("bob"))[0].alert_kind == "approval"
        assert store.query(keys.pending_missions(group_id)) == []

    def test_reapproval_keeps_original_highlight(self, store, group_id) -> None:
        mission = propose(store, group_id, "Build-It Hackathon", date(2026, 3, 14))
        mission_service.approve_mission(store, mission_id=mission.id, highlight="first")
        repeat = mission_service.approve_mission(store, mission_id=mission.id, highlight="second")
        assert repeat.ok and not repeat.changed
        assert store.get(Mission, mission.id).highlight == "first"

    def test_empty_highlight_rejected(self, store, group_id) -> None:
        mission = propose(store, group_id, "Build-It Hackathon", date(2026, 3, 14))
        result = mission_service.approve_mission(store, mission_id=mission.id, highlight="  ")
        assert result.error is ErrorKind.INVALID_ARGUMENT
        assert store.get(Mission, mission.id).approval_status == "pending"

    def test_terminal_states_are_final(self, store, group_id) -> None:
        mission = propose(store, group_id, "Build-It Hackathon", date(2026, 3, 14))
        mission_service.reject_mission(store, mission_id=mission.id)
        assert mission_service.reject_mission(store, mission_id=mission.id).changed is False
        result = mission_service.approve_mission(store, mission_id=mission.id, highlight="late")
        assert result.error is ErrorKind.PRECONDITION_FAILED

    def test_approved_missions_ordered_by_date(self, store, group_id) -> None:
        later = propose(store, group_id, "Demo Day", date(2026, 5, 1))
        sooner = propose(store, group_id, "Kickoff", date(2026, 2, 1))
        for mission in (later, sooner):
            mission_service.approve_mission(store, mission_id=mission.id, highlight=mission.title)
        assert [item.title for item in store.query(keys.approved_missions())] == ["Kickoff", "Demo Day"]
