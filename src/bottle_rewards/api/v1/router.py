"""Primary API router definition."""

from fastapi import APIRouter

from . import auth, profiles, rates, recycling, redemptions

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(profiles.router)
api_router.include_router(rates.router)
api_router.include_router(recycling.router)
api_router.include_router(redemptions.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
