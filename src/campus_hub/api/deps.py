"""Request-scoped dependencies shared by the routers."""

from typing import Any, Optional

from fastapi import HTTPException, Request

from ..collaborators import Collaborators
from ..store.engine import CampusStore
from ..store.mutations import MutationResult


def get_store(request: Request) -> CampusStore:
    """Return the store created with the application."""

    return request.app.state.store


def get_collaborators(request: Request) -> Collaborators:
    return request.app.state.collaborators


def unwrap(result: MutationResult) -> Any:
    """Return the mutation value or raise the matching HTTP error."""

    if not result.ok:
        raise HTTPException(status_code=result.status_code, detail=result.detail)
    return result.value


def require_found(value: Any, label: str, entity_id: str) -> Any:
    if value is None:
        raise HTTPException(status_code=404, detail=f"{label} {entity_id} not found")
    return value


def require_collaborator(collaborator: Optional[Any], label: str) -> Any:
    if collaborator is None:
        raise HTTPException(status_code=503, detail=f"No {label} is configured")
    return collaborator
