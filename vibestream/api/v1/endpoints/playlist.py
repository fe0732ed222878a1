# ============================================================================
# FILE: vibestream/api/v1/endpoints/playlist.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from typing import List
from vibestream.api.dependencies import (
    get_membership_service,
    get_owner_id,
    get_playlist_service,
    get_track_service,
)
from vibestream.core.errors import NotFoundOrAccessDenied, VibeStreamError
from vibestream.core.ids import format_playlist_id, parse_playlist_id
from vibestream.schemas.playlist import (
    PlaylistCreate,
    PlaylistUpdate,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistStats,
    PlaylistTrackAdd,
    PlaylistReorder,
    TrackCheckResponse,
)
from vibestream.schemas.track import TrackUpsert
from vibestream.services.membership_service import MembershipService
from vibestream.services.playlist_service import PlaylistService
from vibestream.services.track_service import TrackService
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[PlaylistSummary])
def get_my_playlists(
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """
    Get all playlists for the current user, with track counts
    """
    return playlists.get_user_playlists(owner_id)


@router.get("/count")
def count_my_playlists(
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """Total playlists owned by the current user"""
    return {"count": playlists.count(owner_id)}


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
def create_playlist(
    playlist_data: PlaylistCreate,
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """
    Create a new playlist
    """
    logger.info(f"Creating playlist \"{playlist_data.name}\" for user {owner_id}")
    return playlists.create_playlist(owner_id, playlist_data)


@router.get("/{playlist_id}", response_model=PlaylistResponse)
def get_playlist(
    playlist_id: str,
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """
    Get a specific playlist with all tracks
    Requires ownership
    """
    playlist = playlists.get_playlist(playlist_id, owner_id)
    if not playlist:
        raise NotFoundOrAccessDenied(playlist_id)
    return playlist


@router.put("/{playlist_id}", response_model=PlaylistResponse)
def update_playlist(
    playlist_id: str,
    update_data: PlaylistUpdate,
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """
    Update playlist details (name, description, cover)
    Requires ownership
    """
    playlist = playlists.update_playlist(playlist_id, owner_id, update_data)
    if not playlist:
        raise NotFoundOrAccessDenied(playlist_id)
    return playlist


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    owner_id: int = Depends(get_owner_id),
    playlists: PlaylistService = Depends(get_playlist_service),
):
    """
    Delete a playlist
    Requires ownership
    """
    if not playlists.delete_playlist(playlist_id, owner_id):
        raise NotFoundOrAccessDenied(playlist_id)
    return {"message": "Playlist deleted successfully", "id": format_playlist_id(parse_playlist_id(playlist_id))}


@router.post("/{playlist_id}/tracks", response_model=PlaylistResponse)
def add_track_to_playlist(
    playlist_id: str,
    track: PlaylistTrackAdd,
    owner_id: int = Depends(get_owner_id),
    memberships: MembershipService = Depends(get_membership_service),
    tracks: TrackService = Depends(get_track_service),
):
    """
    Add a track to a playlist
    If track_data is supplied the track is saved to the registry first
    """
    if track.track_data is not None:
        tracks.upsert_track(TrackUpsert(video_id=track.video_id, **track.track_data.model_dump()))
    return memberships.add_track(playlist_id, track.video_id, owner_id)


@router.delete("/{playlist_id}/tracks/{video_id}")
def remove_track_from_playlist(
    playlist_id: str,
    video_id: str,
    owner_id: int = Depends(get_owner_id),
    memberships: MembershipService = Depends(get_membership_service),
):
    """
    Remove a track from a playlist
    """
    if not memberships.remove_track(playlist_id, video_id, owner_id):
        raise VibeStreamError("Track not found in playlist", code="TRACK_NOT_IN_PLAYLIST", http_status=404)
    return {"message": "Track removed from playlist", "video_id": video_id}


@router.put("/{playlist_id}/tracks/reorder", response_model=PlaylistResponse)
def reorder_playlist_tracks(
    playlist_id: str,
    reorder: PlaylistReorder,
    owner_id: int = Depends(get_owner_id),
    memberships: MembershipService = Depends(get_membership_service),
):
    """
    Reorder tracks; body is the full list of video IDs in the new order
    """
    return memberships.reorder_tracks(playlist_id, reorder.track_order, owner_id)


@router.get("/{playlist_id}/stats", response_model=PlaylistStats)
def get_playlist_stats(
    playlist_id: str,
    owner_id: int = Depends(get_owner_id),
    memberships: MembershipService = Depends(get_membership_service),
):
    """Track count and total duration"""
    return memberships.get_stats(playlist_id, owner_id)


@router.get("/{playlist_id}/tracks/{video_id}/check", response_model=TrackCheckResponse)
def check_track_in_playlist(
    playlist_id: str,
    video_id: str,
    owner_id: int = Depends(get_owner_id),
    memberships: MembershipService = Depends(get_membership_service),
):
    """Check if a track is in a playlist"""
    exists = memberships.has_track(playlist_id, video_id, owner_id)
    return TrackCheckResponse(
        playlist_id=format_playlist_id(parse_playlist_id(playlist_id)),
        video_id=video_id,
        exists=exists,
    )
