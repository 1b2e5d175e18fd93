from fastapi import APIRouter

from chain_indexer.api.endpoints import events

# Create the main API router
router = APIRouter(redirect_slashes=False)

router.include_router(events.router, prefix="/event", tags=["events"])
