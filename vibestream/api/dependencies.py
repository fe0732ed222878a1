# ============================================================================
# FILE: vibestream/api/dependencies.py
# ============================================================================
from fastapi import Request
from vibestream.config import settings
from vibestream.core.ids import require_owner_id
from vibestream.db.session import DatabaseSessionManager
from vibestream.services.membership_service import MembershipService
from vibestream.services.playlist_service import PlaylistService
from vibestream.services.track_service import TrackService


def get_store(request: Request) -> DatabaseSessionManager:
    """Store handle created at startup"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Database not initialized")
    return store


def get_owner_id(request: Request) -> int:
    """
    Owner identity as asserted by the upstream auth gateway.
    The header is trusted as-is; a missing or malformed value is a 400.
    """
    return require_owner_id(request.headers.get(settings.OWNER_HEADER))


def get_playlist_service(request: Request) -> PlaylistService:
    return PlaylistService(get_store(request))


def get_membership_service(request: Request) -> MembershipService:
    return MembershipService(get_store(request))


def get_track_service(request: Request) -> TrackService:
    return TrackService(get_store(request))
