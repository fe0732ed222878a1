# ============================================================================
# FILE: vibestream/api/v1/endpoints/track.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from typing import List
from vibestream.api.dependencies import get_owner_id, get_track_service
from vibestream.core.errors import TrackNotFound
from vibestream.schemas.track import TrackResponse, TrackUpsert
from vibestream.services.track_service import TrackService

router = APIRouter()


@router.get("", response_model=List[TrackResponse])
def list_tracks(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    tracks: TrackService = Depends(get_track_service),
):
    """List saved tracks, newest first"""
    return tracks.list_tracks(limit=limit, offset=offset)


@router.put("", response_model=TrackResponse)
def save_track(
    track_data: TrackUpsert,
    tracks: TrackService = Depends(get_track_service),
):
    """
    Save or update a track by video ID
    Idempotent: the same payload twice leaves one track
    """
    return tracks.upsert_track(track_data)


@router.get("/{video_id}", response_model=TrackResponse)
def get_track(
    video_id: str,
    tracks: TrackService = Depends(get_track_service),
):
    """Get a saved track"""
    track = tracks.find_by_external_id(video_id)
    if track is None:
        raise TrackNotFound(video_id)
    return track


@router.delete("/{video_id}")
def delete_track(
    video_id: str,
    tracks: TrackService = Depends(get_track_service),
):
    """Delete a track; it is removed from every playlist that holds it"""
    if not tracks.delete_track(video_id):
        raise TrackNotFound(video_id)
    return {"message": "Track deleted", "video_id": video_id}


@router.post("/{video_id}/play", response_model=TrackResponse)
def record_play(
    video_id: str,
    owner_id: int = Depends(get_owner_id),
    tracks: TrackService = Depends(get_track_service),
):
    """Increment the play count of a track"""
    return tracks.record_play(video_id, owner_id)
