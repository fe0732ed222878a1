# ============================================================================
# FILE: vibestream/schemas/track.py
# ============================================================================
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class TrackData(BaseModel):
    """Track metadata supplied by the ingestion path (search results etc.)"""
    title: str = Field(min_length=1)
    artist: str = Field(min_length=1)
    album: Optional[str] = None
    cover_url: Optional[str] = None
    duration: int = Field(default=0, ge=0)  # Duration in seconds
    channel_title: Optional[str] = None
    view_count: int = Field(default=0, ge=0)


class TrackUpsert(TrackData):
    """Schema for saving a track keyed by its video ID"""
    video_id: str = Field(min_length=1, max_length=20)


class TrackResponse(BaseModel):
    """Schema for track response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    video_id: str
    title: str
    artist: str
    album: Optional[str] = None
    cover_url: Optional[str] = None
    duration: int = 0
    channel_title: Optional[str] = None
    view_count: int = 0
    play_count: int = 0
    created_at: Optional[datetime] = None
    last_played_at: Optional[datetime] = None
    is_downloaded: bool = False
    local_path: Optional[str] = None
    file_size_mb: Optional[float] = None
