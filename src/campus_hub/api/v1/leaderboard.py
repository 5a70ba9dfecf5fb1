"""Leaderboard, mentor and activity endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...schemas import Account, AchievementFeedEntry
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_store

router = APIRouter(tags=["leaderboard"])


@router.get(
    "/leaderboard",
    response_model=List[Account],
    summary="Top accounts by points",
    responses={
        200: {
            "description": "Accounts ordered by points, ties by id",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "id": "u101",
                            "email": "k.sharma@example.edu",
                            "display_name": "Karan Sharma",
                            "role": "student",
                            "points": 450,
                            "joined_group_ids": ["5f0c2a7e9b1d4c3e8a6f1b2d3c4e5f60"],
                            "skill_tags": ["Frontend"],
                            "interest_tags": ["React"],
                            "badge_ids": ["b1"],
                            "achievements": [],
                            "verified": True,
                        }
                    ]
                }
            },
        }
    },
)
def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=500, description="Number of top accounts to return"),
    store: CampusStore = Depends(get_store),
) -> List[Account]:
    """Return ranked accounts; defaults to the configured leaderboard size."""

    return store.query(keys.leaderboard(limit or store.options.leaderboard_limit))


@router.get("/mentors", response_model=List[Account], summary="Accounts eligible to mentor")
def list_mentors(store: CampusStore = Depends(get_store)) -> List[Account]:
    return store.query(keys.mentors())


@router.get("/achievements/recent", response_model=List[AchievementFeedEntry], summary="Recent achievements")
def list_recent_achievements(store: CampusStore = Depends(get_store)) -> List[AchievementFeedEntry]:
    return store.query(keys.recent_achievements())
