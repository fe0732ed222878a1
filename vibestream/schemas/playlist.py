# ============================================================================
# FILE: vibestream/schemas/playlist.py
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from vibestream.schemas.track import TrackData, TrackResponse


class PlaylistCreate(BaseModel):
    """Schema for creating a playlist"""
    name: str = Field(max_length=255)
    description: Optional[str] = None
    cover_url: Optional[str] = None


class PlaylistUpdate(BaseModel):
    """Schema for updating a playlist; omitted fields are left unchanged"""
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    cover_url: Optional[str] = None


class PlaylistTrackAdd(BaseModel):
    """Schema for adding a track to a playlist"""
    video_id: str = Field(min_length=1)
    # Saved to the track registry first when present
    track_data: Optional[TrackData] = None


class PlaylistReorder(BaseModel):
    """Schema for reordering playlist tracks"""
    track_order: List[str]


class PlaylistTrackResponse(TrackResponse):
    """A track as a member of a playlist"""
    position: int
    added_at: Optional[datetime] = None


class PlaylistResponse(BaseModel):
    """Playlist with its ordered tracks"""
    id: str  # "p<db_id>"
    db_id: int
    name: str
    description: str = ""
    cover_url: str
    type: str = "playlist"
    tracks: List[PlaylistTrackResponse] = []
    created_at: datetime
    updated_at: datetime


class PlaylistSummary(BaseModel):
    """Playlist listing entry (no tracks)"""
    id: str
    db_id: int
    name: str
    description: str = ""
    cover_url: str
    type: str = "playlist"
    track_count: int = 0
    created_at: datetime
    updated_at: datetime


class PlaylistStats(BaseModel):
    """Derived playlist statistics"""
    playlist: PlaylistResponse
    track_count: int
    total_duration: int
    total_duration_formatted: str


class TrackCheckResponse(BaseModel):
    """Whether a track is in a playlist"""
    playlist_id: str
    video_id: str
    exists: bool
