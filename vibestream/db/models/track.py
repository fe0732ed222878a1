# ============================================================================
# FILE: vibestream/db/models/track.py
# ============================================================================
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, Boolean, Float
from vibestream.db.base import Base, utcnow

DEFAULT_ALBUM = "YouTube Music"


class Track(Base):
    """Track metadata keyed by YouTube video ID, shared across playlists"""
    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(String(20), unique=True, index=True, nullable=False)  # YouTube video ID
    title = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False)
    album = Column(String(255), default=DEFAULT_ALBUM)
    cover_url = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds
    channel_title = Column(String(255), nullable=True)
    view_count = Column(BigInteger, nullable=False, default=0)
    play_count = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime, default=utcnow)
    last_played_at = Column(DateTime, nullable=True, index=True)

    # Local download state
    is_downloaded = Column(Boolean, nullable=False, default=False)
    local_path = Column(Text, nullable=True)
    file_size_mb = Column(Float, nullable=True)
