"""Primary API router definition."""

from fastapi import APIRouter

from . import accounts, broadcasts, groups, initiatives, leaderboard, messages, missions

api_router = APIRouter()

api_router.include_router(accounts.router)
api_router.include_router(groups.router)
api_router.include_router(initiatives.router)
api_router.include_router(missions.router)
api_router.include_router(broadcasts.router)
api_router.include_router(messages.router)
api_router.include_router(leaderboard.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
