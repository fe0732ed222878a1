# ============================================================================
# FILE: vibestream/services/track_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.orm import Session
from vibestream.core.errors import TrackNotFound, ValidationError
from vibestream.core.ids import require_owner_id
from vibestream.db.base import utcnow
from vibestream.db.models.playlist import Playlist, PlaylistTrack
from vibestream.db.models.track import DEFAULT_ALBUM, Track
from vibestream.db.session import DatabaseSessionManager
from vibestream.schemas.track import TrackResponse, TrackUpsert
from vibestream.services.ordering import reindex_playlist, reset_cover
import logging

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


def find_track(db: Session, video_id: str) -> Optional[Track]:
    """Resolve a track by its external (YouTube) ID within an open session"""
    return db.query(Track).filter(Track.video_id == video_id).first()


def require_video_id(video_id) -> str:
    if not isinstance(video_id, str) or not video_id.strip():
        raise ValidationError("Video ID is required", field="video_id")
    return video_id.strip()


class TrackService:
    """Track registry: metadata keyed by YouTube video ID"""

    def __init__(self, store: DatabaseSessionManager):
        self._store = store

    def find_by_external_id(self, video_id: str) -> Optional[TrackResponse]:
        """Get a track by video ID"""
        video_id = require_video_id(video_id)
        with self._store.session() as db:
            track = find_track(db, video_id)
            return TrackResponse.model_validate(track) if track else None

    def get_track(self, track_id: int) -> Optional[TrackResponse]:
        """Get a track by internal ID"""
        with self._store.session() as db:
            track = db.get(Track, track_id)
            return TrackResponse.model_validate(track) if track else None

    def list_tracks(self, limit: int = 50, offset: int = 0) -> List[TrackResponse]:
        """List tracks, newest first"""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")
        if offset < 0:
            raise ValidationError("offset must be >= 0", field="offset")
        with self._store.session() as db:
            tracks = (
                db.query(Track)
                .order_by(Track.created_at.desc(), Track.id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [TrackResponse.model_validate(t) for t in tracks]

    def upsert_track(self, data: TrackUpsert) -> TrackResponse:
        """
        Save or update a track keyed by video ID.
        Counters and download state of an existing track are preserved.
        """
        with self._store.atomic() as db:
            track = find_track(db, data.video_id)
            created = track is None
            if created:
                track = Track(video_id=data.video_id, is_downloaded=False, play_count=0)
                db.add(track)

            track.title = data.title
            track.artist = data.artist
            track.album = data.album or DEFAULT_ALBUM
            track.cover_url = data.cover_url
            track.duration = data.duration
            track.channel_title = data.channel_title
            track.view_count = data.view_count
            db.flush()

            logger.info(f"Track {'created' if created else 'updated'}: {data.video_id}")
            return TrackResponse.model_validate(track)

    def delete_track(self, video_id: str) -> bool:
        """
        Delete a track and its playlist memberships.
        Every playlist that contained it is reindexed in the same transaction,
        and one left empty gets its default cover back.
        """
        video_id = require_video_id(video_id)
        with self._store.atomic() as db:
            track = find_track(db, video_id)
            if track is None:
                return False

            playlist_ids = [
                row[0]
                for row in db.query(PlaylistTrack.playlist_id)
                .filter(PlaylistTrack.track_id == track.id)
                .distinct()
                .all()
            ]
            # Lock in id order so concurrent deletes can't deadlock
            playlists = (
                db.query(Playlist)
                .filter(Playlist.id.in_(playlist_ids))
                .order_by(Playlist.id)
                .with_for_update()
                .all()
            ) if playlist_ids else []

            db.query(PlaylistTrack).filter(PlaylistTrack.track_id == track.id).delete(
                synchronize_session="fetch"
            )
            db.delete(track)
            db.flush()

            for playlist in playlists:
                if reindex_playlist(db, playlist.id) == 0:
                    reset_cover(playlist)

            logger.info(f"Track deleted: {video_id} (removed from {len(playlists)} playlists)")
            return True

    def record_play(self, video_id: str, owner_id: int) -> TrackResponse:
        """Increment play count and stamp last_played_at"""
        owner_id = require_owner_id(owner_id)
        video_id = require_video_id(video_id)
        with self._store.atomic() as db:
            track = find_track(db, video_id)
            if track is None:
                raise TrackNotFound(video_id)
            track.play_count = Track.play_count + 1
            track.last_played_at = utcnow()
            db.flush()
            db.refresh(track)
            logger.info(f"Recorded play: {video_id} by user {owner_id}")
            return TrackResponse.model_validate(track)

    def update_local_status(self, video_id: str, local_path: str, file_size_mb: Optional[float] = None) -> TrackResponse:
        """Mark a track as downloaded to local storage"""
        video_id = require_video_id(video_id)
        if not local_path:
            raise ValidationError("local_path is required", field="local_path")
        with self._store.atomic() as db:
            track = find_track(db, video_id)
            if track is None:
                raise TrackNotFound(video_id)
            track.local_path = local_path
            track.file_size_mb = file_size_mb
            track.is_downloaded = True
            db.flush()
            logger.info(f"Track {video_id} marked as local")
            return TrackResponse.model_validate(track)
