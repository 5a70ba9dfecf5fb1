"""Service layer exports."""

from . import (
	account_service,
	alert_service,
	broadcast_service,
	gamification_service,
	group_service,
	initiative_service,
	leaderboard_service,
	messaging_service,
	mission_service,
)

__all__ = [
	"account_service",
	"alert_service",
	"broadcast_service",
	"gamification_service",
	"group_service",
	"initiative_service",
	"leaderboard_service",
	"messaging_service",
	"mission_service",
]
