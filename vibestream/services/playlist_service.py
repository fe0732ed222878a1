# ============================================================================
# FILE: vibestream/services/playlist_service.py
# ============================================================================
from typing import List, Optional, Union
from sqlalchemy import func
from sqlalchemy.orm import Session
from vibestream.core.errors import StoreError, ValidationError
from vibestream.core.ids import format_playlist_id, parse_playlist_id, require_owner_id
from vibestream.db.models.playlist import DEFAULT_COVER, Playlist, PlaylistTrack
from vibestream.db.models.track import Track
from vibestream.db.session import DatabaseSessionManager
from vibestream.schemas.playlist import (
    PlaylistCreate,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistTrackResponse,
    PlaylistUpdate,
)
from vibestream.services.ordering import find_owned_playlist, touch
import logging

logger = logging.getLogger(__name__)

PlaylistId = Union[str, int]


def load_playlist_tracks(db: Session, playlist_id: int) -> List[PlaylistTrackResponse]:
    """Tracks joined with their membership, ordered by position"""
    rows = (
        db.query(Track, PlaylistTrack)
        .join(PlaylistTrack, PlaylistTrack.track_id == Track.id)
        .filter(PlaylistTrack.playlist_id == playlist_id)
        .order_by(PlaylistTrack.position.asc())
        .all()
    )
    tracks = []
    for track, membership in rows:
        data = {column.key: getattr(track, column.key) for column in Track.__table__.columns}
        data["position"] = membership.position
        data["added_at"] = membership.added_at
        tracks.append(PlaylistTrackResponse(**data))
    return tracks


def to_playlist_response(db: Session, playlist: Playlist) -> PlaylistResponse:
    """Build the plain playlist aggregate, tracks included"""
    db.flush()
    return PlaylistResponse(
        id=format_playlist_id(playlist.id),
        db_id=playlist.id,
        name=playlist.name,
        description=playlist.description or "",
        cover_url=playlist.cover_url,
        tracks=load_playlist_tracks(db, playlist.id),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Please provide a playlist name", field="name")
    return name.strip()


class PlaylistService:
    """Playlist records, always scoped to their owner"""

    def __init__(self, store: DatabaseSessionManager):
        self._store = store

    def create_playlist(self, user_id: int, playlist_data: PlaylistCreate) -> PlaylistResponse:
        """Create a new playlist for a user"""
        user_id = require_owner_id(user_id)
        name = _clean_name(playlist_data.name)
        with self._store.atomic() as db:
            playlist = Playlist(
                user_id=user_id,
                name=name,
                description=(playlist_data.description or "").strip(),
                cover_url=playlist_data.cover_url or DEFAULT_COVER,
            )
            db.add(playlist)
            db.flush()
            logger.info(f"Playlist created: {playlist.id} for user {user_id}")
            return to_playlist_response(db, playlist)

    def get_user_playlists(self, user_id: int) -> List[PlaylistSummary]:
        """Get all playlists for a user, most recently updated first"""
        user_id = require_owner_id(user_id)
        with self._store.session() as db:
            counts = (
                db.query(PlaylistTrack.playlist_id, func.count(PlaylistTrack.id).label("track_count"))
                .group_by(PlaylistTrack.playlist_id)
                .subquery()
            )
            rows = (
                db.query(Playlist, func.coalesce(counts.c.track_count, 0))
                .outerjoin(counts, counts.c.playlist_id == Playlist.id)
                .filter(Playlist.user_id == user_id)
                .order_by(Playlist.updated_at.desc(), Playlist.id.desc())
                .all()
            )
            return [
                PlaylistSummary(
                    id=format_playlist_id(playlist.id),
                    db_id=playlist.id,
                    name=playlist.name,
                    description=playlist.description or "",
                    cover_url=playlist.cover_url,
                    track_count=track_count,
                    created_at=playlist.created_at,
                    updated_at=playlist.updated_at,
                )
                for playlist, track_count in rows
            ]

    def get_playlist(self, playlist_id: PlaylistId, user_id: int) -> Optional[PlaylistResponse]:
        """Get a specific playlist with its tracks (verify ownership)"""
        playlist_id = parse_playlist_id(playlist_id)
        user_id = require_owner_id(user_id)
        with self._store.session() as db:
            playlist = find_owned_playlist(db, playlist_id, user_id)
            if not playlist:
                return None
            return to_playlist_response(db, playlist)

    def update_playlist(self, playlist_id: PlaylistId, user_id: int, update_data: PlaylistUpdate) -> Optional[PlaylistResponse]:
        """Update playlist details; only supplied fields change"""
        playlist_id = parse_playlist_id(playlist_id)
        user_id = require_owner_id(user_id)
        with self._store.atomic() as db:
            playlist = find_owned_playlist(db, playlist_id, user_id, lock=True)
            if not playlist:
                return None

            changed = False
            if update_data.name is not None:
                playlist.name = _clean_name(update_data.name)
                changed = True
            if update_data.description is not None:
                playlist.description = update_data.description.strip()
                changed = True
            if update_data.cover_url is not None:
                playlist.cover_url = update_data.cover_url or DEFAULT_COVER
                changed = True

            if changed:
                touch(playlist)
                logger.info(f"Playlist updated: {playlist_id}")
            return to_playlist_response(db, playlist)

    def delete_playlist(self, playlist_id: PlaylistId, user_id: int) -> bool:
        """Delete a playlist and its memberships"""
        playlist_id = parse_playlist_id(playlist_id)
        user_id = require_owner_id(user_id)
        with self._store.atomic() as db:
            playlist = find_owned_playlist(db, playlist_id, user_id, lock=True)
            if not playlist:
                return False
            db.query(PlaylistTrack).filter(PlaylistTrack.playlist_id == playlist.id).delete(
                synchronize_session="fetch"
            )
            db.delete(playlist)
            logger.info(f"Playlist deleted: {playlist_id}")
            return True

    def count(self, user_id: int) -> int:
        """Number of playlists a user owns; 0 if the store is unavailable"""
        user_id = require_owner_id(user_id)
        try:
            with self._store.session() as db:
                return db.query(func.count(Playlist.id)).filter(Playlist.user_id == user_id).scalar() or 0
        except StoreError as e:
            logger.warning(f"Error counting playlists for user {user_id}: {e}")
            return 0
