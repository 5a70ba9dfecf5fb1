"""Static badge catalog."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

BadgeCategory = Literal["contribution", "skill", "participation", "milestone"]


class Badge(BaseModel):
    """Badge definition; accounts reference badges by id."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    color: str
    category: BadgeCategory


BADGE_CATALOG: tuple[Badge, ...] = (
    Badge(id="b1", name="Nexus Pioneer", description="Early adopter of the campus hub.", icon="Zap", color="indigo", category="milestone"),
    Badge(id="b2", name="Code Maestro", description="Validated expertise in programming languages.", icon="Terminal", color="emerald", category="skill"),
    Badge(id="b3", name="Event Legend", description="Attended over 10 college workshops.", icon="Calendar", color="amber", category="participation"),
    Badge(id="b4", name="Top Contributor", description="High engagement in community discussions.", icon="MessageSquare", color="blue", category="contribution"),
    Badge(id="b5", name="Visionary", description="Created a high-impact club or project.", icon="Eye", color="violet", category="milestone"),
)


def find_badge(badge_id: str):
    """Return the catalog entry for ``badge_id`` or ``None``."""

    return next((badge for badge in BADGE_CATALOG if badge.id == badge_id), None)
