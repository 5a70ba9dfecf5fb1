"""Mission (event proposal) endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...collaborators import Collaborators, TextGenerator
from ...schemas import Mission, MissionApproval, MissionCreate
from ...services import mission_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_collaborators, get_store, require_collaborator, require_found, unwrap

router = APIRouter(prefix="/missions", tags=["missions"])


@router.post(
    "",
    response_model=Mission,
    status_code=status.HTTP_201_CREATED,
    summary="Propose a mission",
    responses={
        400: {"description": "Invalid proposal"},
        404: {"description": "Group or proposer not found"},
    },
)
def propose_mission(payload: MissionCreate, store: CampusStore = Depends(get_store)) -> Mission:
    """Record a pending mission.

    Example request body::

        {
            "group_id": "5f0c2a7e9b1d4c3e8a6f1b2d3c4e5f60",
            "proposer_id": "u101",
            "title": "Build-It Hackathon",
            "date": "2026-11-21",
            "location": "Main Auditorium",
            "mission_kind": "hackathon"
        }
    """

    return unwrap(
        mission_service.propose_mission(
            store,
            group_id=payload.group_id,
            proposer_id=payload.proposer_id,
            title=payload.title,
            date=payload.date,
            description=payload.description,
            location=payload.location,
            mission_kind=payload.mission_kind,
            required_skill_tags=payload.required_skill_tags,
            media_ref=payload.media_ref,
        )
    )


@router.get("", response_model=List[Mission], summary="Approved missions by date")
def list_approved_missions(store: CampusStore = Depends(get_store)) -> List[Mission]:
    return store.query(keys.approved_missions())


@router.post(
    "/{mission_id}/approve",
    response_model=Mission,
    summary="Approve a mission",
    responses={
        409: {"description": "Mission already rejected"},
        503: {"description": "No highlight given and no text generator configured"},
    },
)
def approve_mission(
    mission_id: str,
    payload: MissionApproval,
    store: CampusStore = Depends(get_store),
    collaborators: Collaborators = Depends(get_collaborators),
) -> Mission:
    """Approve with the supplied highlight, or one summarized by the text generator."""

    highlight = payload.highlight
    if highlight is None:
        mission = require_found(store.get(Mission, mission_id), "Mission", mission_id)
        if mission.approval_status == "pending":
            generator: TextGenerator = require_collaborator(collaborators.text_generator, "text generator")
            highlight = generator.summarize_mission(mission.model_dump(mode="json"))
        else:
            highlight = mission.highlight
    return unwrap(mission_service.approve_mission(store, mission_id=mission_id, highlight=highlight))


@router.post(
    "/{mission_id}/reject",
    response_model=Mission,
    summary="Reject a mission",
    responses={409: {"description": "Mission already approved"}},
)
def reject_mission(mission_id: str, store: CampusStore = Depends(get_store)) -> Mission:
    return unwrap(mission_service.reject_mission(store, mission_id=mission_id))
