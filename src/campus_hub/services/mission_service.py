"""Domain logic for mission (event) proposals."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional

from ..core.errors import invalid_argument, precondition_failed
from ..schemas import Account, Group, Mission
from ..store.mutations import UnitOfWork, mutation
from .alert_service import emit_alert


@mutation
def propose_mission(
    uow: UnitOfWork,
    *,
    group_id: str,
    proposer_id: str,
    title: str,
    date: dt.date,
    description: str = "",
    location: str = "",
    mission_kind: str = "workshop",
    required_skill_tags: Iterable[str] = (),
    media_ref: Optional[str] = None,
) -> Mission:
    """Record a pending proposal for review by the group's leadership."""

    if not title or not title.strip():
        raise invalid_argument("Mission title must not be empty.")
    uow.require(Group, group_id)
    proposer = uow.require(Account, proposer_id)

    try:
        mission = Mission(
            id=uow.new_id(),
            group_id=group_id,
            title=title.strip(),
            description=description,
            date=date,
            location=location,
            mission_kind=mission_kind,
            required_skill_tags=frozenset(required_skill_tags),
            proposer_id=proposer_id,
            proposer_name=proposer.display_name,
            media_ref=media_ref,
            created_at=uow.now(),
        )
    except ValueError as exc:
        raise invalid_argument(f"Invalid mission proposal: {exc}") from exc
    return uow.put(mission)


@mutation
def approve_mission(uow: UnitOfWork, *, mission_id: str, highlight: str) -> Mission:
    """Approve once with an externally generated highlight.

    Approving an already approved mission changes nothing, including its
    highlight.
    """

    mission = uow.require(Mission, mission_id)
    if mission.approval_status == "approved":
        return mission
    if mission.approval_status == "rejected":
        raise precondition_failed(f"Mission {mission.title} was rejected and cannot be approved.")
    if not highlight or not highlight.strip():
        raise invalid_argument("An approved mission needs a highlight.")

    mission = uow.update(Mission, mission_id, approval_status="approved", highlight=highlight.strip())
    emit_alert(
        uow,
        recipient_id=mission.proposer_id,
        title="Mission Approved",
        body=f"{mission.title} is now on the campus calendar.",
        alert_kind="approval",
    )
    return mission


@mutation
def reject_mission(uow: UnitOfWork, *, mission_id: str) -> Mission:
    mission = uow.require(Mission, mission_id)
    if mission.approval_status == "rejected":
        return mission
    if mission.approval_status == "approved":
        raise precondition_failed(f"Mission {mission.title} was approved and cannot be rejected.")

    mission = uow.update(Mission, mission_id, approval_status="rejected")
    emit_alert(
        uow,
        recipient_id=mission.proposer_id,
        title="Mission Declined",
        body=f"{mission.title} was not approved.",
        alert_kind="rejection",
    )
    return mission
