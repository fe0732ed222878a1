# ============================================================================
# FILE: vibestream/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from vibestream.api.v1.endpoints import playlist, track

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(playlist.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(track.router, prefix="/tracks", tags=["tracks"])
