"""Interfaces of the external systems the store relies on.

The store never calls these itself. Routers invoke them first and pass the
results (an identity, a media reference, a highlight text, a moderation
verdict) into a mutation, so a slow external call never holds the writer
lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

from .schemas.account import UserRole


@dataclass(frozen=True)
class Identity:
    """Claims issued by the identity provider on sign-in."""

    account_id: str
    email: str
    role: UserRole = "student"
    display_name: Optional[str] = None


class IdentityProvider(Protocol):
    def authenticate(self, email: str, credential: str) -> Identity:
        """Return verified claims; raises ``PermissionError`` on bad credentials."""


class MediaUploader(Protocol):
    def upload(self, data: bytes, *, file_name: str, content_type: str) -> str:
        """Store ``data`` and return a stable, retrievable reference."""


@dataclass(frozen=True)
class ModerationVerdict:
    flagged: bool
    reason: Optional[str] = None


class TextGenerator(Protocol):
    def summarize_mission(self, mission: Mapping[str, Any]) -> str: ...

    def moderate(self, text: str) -> ModerationVerdict: ...

    def recommend(self, profile: Mapping[str, Any], candidates: Sequence[Mapping[str, Any]]) -> Sequence[str]: ...

    def rank_collaborators(self, initiative: Mapping[str, Any], candidates: Sequence[Mapping[str, Any]]) -> Sequence[str]: ...


@dataclass(frozen=True)
class Collaborators:
    """External services wired into the HTTP layer; any of them may be absent."""

    identity_provider: Optional[IdentityProvider] = None
    media_uploader: Optional[MediaUploader] = None
    text_generator: Optional[TextGenerator] = None
