# ============================================================================
# FILE: vibestream/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from vibestream.db.base import Base, utcnow

# Cover value meaning "no cover chosen yet"
DEFAULT_COVER = "default"


class Playlist(Base):
    """Playlist model for user-created playlists"""
    __tablename__ = "playlists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    cover_url = Column(Text, nullable=False, default=DEFAULT_COVER)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow)

    # Relationships
    memberships = relationship(
        "PlaylistTrack",
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PlaylistTrack.position",
    )


class PlaylistTrack(Base):
    """Junction table for playlist tracks, with an explicit position"""
    __tablename__ = "playlist_tracks"
    __table_args__ = (
        UniqueConstraint("playlist_id", "track_id", name="unique_playlist_track"),
    )

    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    track_id = Column(Integer, ForeignKey("tracks.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0, index=True)
    added_at = Column(DateTime, default=utcnow)

    # Relationships
    playlist = relationship("Playlist", back_populates="memberships")
    track = relationship("Track")
