"""Account, alert and mentorship endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ...collaborators import Collaborators, Identity, IdentityProvider
from ...schemas import (
    BADGE_CATALOG,
    Account,
    Alert,
    Badge,
    BadgeAward,
    Mentorship,
    MentorshipCreate,
    PointsAward,
    ProfileUpdate,
)
from ...schemas.account import UserRole
from ...services import account_service, alert_service, gamification_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_collaborators, get_store, require_collaborator, require_found, unwrap

router = APIRouter(prefix="/accounts", tags=["accounts"])


class SignInRequest(BaseModel):
    """Identity claims forwarded from the identity provider."""

    account_id: str = Field(..., min_length=1, max_length=128)
    email: str
    role: UserRole = "student"
    display_name: Optional[str] = None


class MentorshipStatusChange(BaseModel):
    status: str


@router.post(
    "/sign-in",
    response_model=Account,
    summary="Look up or provision an account",
    responses={
        200: {
            "description": "Account for the signed-in identity",
            "content": {
                "application/json": {
                    "example": {
                        "id": "u101",
                        "email": "k.sharma@example.edu",
                        "display_name": "k.sharma",
                        "role": "student",
                        "points": 0,
                        "joined_group_ids": [],
                        "skill_tags": [],
                        "interest_tags": [],
                        "badge_ids": [],
                        "achievements": [],
                        "verified": False,
                    }
                }
            },
        },
        400: {"description": "Email outside the allowed domain"},
        409: {"description": "Email registered to another account"},
    },
)
def sign_in(payload: SignInRequest, store: CampusStore = Depends(get_store)) -> Account:
    """Return the account for an identity, creating it on first sign-in."""

    identity = Identity(
        account_id=payload.account_id,
        email=payload.email,
        role=payload.role,
        display_name=payload.display_name,
    )
    return unwrap(
        account_service.sign_in(
            store,
            identity=identity,
            allowed_email_domain=store.allowed_email_domain,
        )
    )


class CredentialSignIn(BaseModel):
    """Credentials checked by the configured identity provider."""

    email: str
    credential: str = Field(..., min_length=1)


@router.post(
    "/authenticate",
    response_model=Account,
    summary="Verify credentials, then sign in",
    responses={
        401: {"description": "Credentials rejected by the identity provider"},
        503: {"description": "No identity provider configured"},
    },
)
def authenticate(
    payload: CredentialSignIn,
    store: CampusStore = Depends(get_store),
    collaborators: Collaborators = Depends(get_collaborators),
) -> Account:
    provider: IdentityProvider = require_collaborator(collaborators.identity_provider, "identity provider")
    try:
        identity = provider.authenticate(payload.email, payload.credential)
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return unwrap(
        account_service.sign_in(
            store,
            identity=identity,
            allowed_email_domain=store.allowed_email_domain,
        )
    )


@router.get("/badges", response_model=List[Badge], summary="Badge catalog")
def list_badges() -> List[Badge]:
    return list(BADGE_CATALOG)


@router.get("/{account_id}", response_model=Account, summary="Fetch one account")
def get_account(account_id: str, store: CampusStore = Depends(get_store)) -> Account:
    return require_found(store.query(keys.account(account_id)), "Account", account_id)


@router.patch("/{account_id}", response_model=Account, summary="Edit profile fields")
def update_profile(
    account_id: str,
    payload: ProfileUpdate,
    store: CampusStore = Depends(get_store),
) -> Account:
    return unwrap(
        account_service.update_profile(
            store,
            account_id=account_id,
            display_name=payload.display_name,
            skill_tags=payload.skill_tags,
            interest_tags=payload.interest_tags,
        )
    )


@router.post(
    "/{account_id}/points",
    response_model=Account,
    summary="Award points",
    responses={400: {"description": "Non-positive amount"}, 404: {"description": "Account not found"}},
)
def award_points(
    account_id: str,
    payload: PointsAward,
    store: CampusStore = Depends(get_store),
) -> Account:
    """Add points and record an achievement.

    Example request body::

        {"amount": 50, "reason": "Hackathon finalist"}
    """

    return unwrap(
        gamification_service.award_points(
            store, account_id=account_id, amount=payload.amount, reason=payload.reason
        )
    )


@router.post("/{account_id}/badges", response_model=Account, summary="Award a catalog badge")
def award_badge(
    account_id: str,
    payload: BadgeAward,
    store: CampusStore = Depends(get_store),
) -> Account:
    return unwrap(gamification_service.award_badge(store, account_id=account_id, badge_id=payload.badge_id))


@router.get("/{account_id}/alerts", response_model=List[Alert], summary="Alerts, newest first")
def list_alerts(account_id: str, store: CampusStore = Depends(get_store)) -> List[Alert]:
    return store.query(keys.alerts(account_id))


@router.post("/{account_id}/alerts/read", summary="Mark every alert as read")
def mark_alerts_read(account_id: str, store: CampusStore = Depends(get_store)) -> dict[str, int]:
    marked = unwrap(alert_service.mark_alerts_read(store, recipient_id=account_id))
    return {"marked": marked}


@router.get("/{account_id}/conversations", response_model=List[Account], summary="Direct-message partners")
def list_conversation_partners(account_id: str, store: CampusStore = Depends(get_store)) -> List[Account]:
    return store.query(keys.partners(account_id))


@router.get("/{account_id}/mentorships", response_model=List[Mentorship], summary="Mentorship requests")
def list_mentorships(account_id: str, store: CampusStore = Depends(get_store)) -> List[Mentorship]:
    return store.query(keys.mentorships(account_id))


@router.post(
    "/mentorships",
    response_model=Mentorship,
    status_code=status.HTTP_201_CREATED,
    summary="Ask a mentor for guidance",
)
def request_mentorship(payload: MentorshipCreate, store: CampusStore = Depends(get_store)) -> Mentorship:
    return unwrap(
        alert_service.request_mentorship(
            store,
            mentee_id=payload.mentee_id,
            mentor_id=payload.mentor_id,
            topic=payload.topic,
            message=payload.message,
        )
    )


@router.post("/mentorships/{mentorship_id}/status", response_model=Mentorship, summary="Advance a mentorship")
def update_mentorship_status(
    mentorship_id: str,
    payload: MentorshipStatusChange,
    store: CampusStore = Depends(get_store),
) -> Mentorship:
    return unwrap(
        alert_service.update_mentorship_status(store, mentorship_id=mentorship_id, status=payload.status)
    )
