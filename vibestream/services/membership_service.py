# ============================================================================
# FILE: vibestream/services/membership_service.py
# ============================================================================
"""Playlist membership and ordering.

Every mutation runs in a single unit of work on the injected store: the
ownership check, track resolution, membership change, reindex and cover update
commit together or not at all. The playlist row is locked first, so
concurrent mutations of the same playlist are serialized and never compute
the same next position.

Cover rule: a playlist still showing the default cover adopts the cover of
the first track added that has one; emptying the playlist restores the
default.
"""

from typing import Iterable, List
from sqlalchemy import func
from vibestream.core.errors import NotFoundOrAccessDenied, StoreError, TrackNotFound, ValidationError
from vibestream.core.ids import parse_playlist_id, require_owner_id
from vibestream.db.models.playlist import DEFAULT_COVER, PlaylistTrack
from vibestream.db.models.track import Track
from vibestream.db.session import DatabaseSessionManager
from vibestream.schemas.playlist import PlaylistResponse, PlaylistStats, PlaylistTrackResponse
from vibestream.services.ordering import (
    apply_order,
    find_owned_playlist,
    lock_owned_playlist,
    next_position,
    ordered_memberships,
    reindex_playlist,
    reset_cover,
    touch,
)
from vibestream.services.playlist_service import PlaylistId, load_playlist_tracks, to_playlist_response
from vibestream.services.track_service import find_track, require_video_id
import logging

logger = logging.getLogger(__name__)


def format_duration(seconds: int) -> str:
    """Seconds -> "1 hr 5 min" or "42 min" """
    seconds = int(seconds or 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours} hr {minutes} min"
    return f"{minutes} min"


class MembershipService:
    """Adds, removes and orders tracks within a playlist"""

    def __init__(self, store: DatabaseSessionManager):
        self._store = store

    def add_track(self, playlist_id: PlaylistId, video_id: str, owner_id: int) -> PlaylistResponse:
        """
        Append a registered track to the end of a playlist.

        Re-adding a track that is already present moves it to the end instead
        of creating a second row.

        Raises:
            NotFoundOrAccessDenied: playlist missing or owned by someone else
            TrackNotFound: video ID not in the track registry
        """
        playlist_id = parse_playlist_id(playlist_id)
        owner_id = require_owner_id(owner_id)
        video_id = require_video_id(video_id)

        with self._store.atomic() as db:
            playlist = lock_owned_playlist(db, playlist_id, owner_id)

            track = find_track(db, video_id)
            if track is None:
                raise TrackNotFound(video_id)

            position = next_position(db, playlist.id)
            membership = db.query(PlaylistTrack).filter(
                PlaylistTrack.playlist_id == playlist.id,
                PlaylistTrack.track_id == track.id,
            ).first()

            if membership is None:
                db.add(PlaylistTrack(playlist_id=playlist.id, track_id=track.id, position=position))
                db.flush()
            else:
                # Moving to the end vacates the old slot
                membership.position = position
                reindex_playlist(db, playlist.id)

            if playlist.cover_url == DEFAULT_COVER and track.cover_url:
                playlist.cover_url = track.cover_url
                touch(playlist)

            logger.info(
                f"Added track {video_id} to playlist {playlist_id}",
                extra={"playlist_id": playlist_id, "video_id": video_id, "owner_id": owner_id},
            )
            return to_playlist_response(db, playlist)

    def remove_track(self, playlist_id: PlaylistId, video_id: str, owner_id: int) -> bool:
        """
        Remove a track and close the gap it leaves.

        Returns True only if a membership row was deleted; an unknown video ID
        is a no-op that returns False.
        """
        playlist_id = parse_playlist_id(playlist_id)
        owner_id = require_owner_id(owner_id)
        video_id = require_video_id(video_id)

        with self._store.atomic() as db:
            playlist = lock_owned_playlist(db, playlist_id, owner_id)

            track = find_track(db, video_id)
            if track is None:
                return False

            membership = db.query(PlaylistTrack).filter(
                PlaylistTrack.playlist_id == playlist.id,
                PlaylistTrack.track_id == track.id,
            ).first()
            removed = membership is not None
            if removed:
                db.delete(membership)
                db.flush()

            remaining = reindex_playlist(db, playlist.id)
            if remaining == 0:
                reset_cover(playlist)

            if removed:
                logger.info(
                    f"Removed track {video_id} from playlist {playlist_id}",
                    extra={"playlist_id": playlist_id, "video_id": video_id, "owner_id": owner_id},
                )
            return removed

    def reorder_tracks(self, playlist_id: PlaylistId, ordered_video_ids: Iterable[str], owner_id: int) -> PlaylistResponse:
        """
        Put members in the order given by ``ordered_video_ids``.

        IDs that are not members of the playlist are skipped, as are repeats
        of an ID already placed. Members the caller left out keep their
        relative order after the listed ones.
        """
        if ordered_video_ids is None or isinstance(ordered_video_ids, (str, bytes)):
            raise ValidationError("trackOrder must be an array of video IDs", field="track_order")
        ordered_video_ids = list(ordered_video_ids)
        playlist_id = parse_playlist_id(playlist_id)
        owner_id = require_owner_id(owner_id)

        with self._store.atomic() as db:
            playlist = lock_owned_playlist(db, playlist_id, owner_id)

            current = ordered_memberships(db, playlist.id)
            video_ids = dict(
                db.query(Track.id, Track.video_id)
                .filter(Track.id.in_([m.track_id for m in current]))
                .all()
            ) if current else {}
            by_video_id = {video_ids[m.track_id]: m for m in current}

            placed = []
            seen = set()
            for video_id in ordered_video_ids:
                membership = by_video_id.get(video_id)
                if membership is None or membership.id in seen:
                    logger.debug(f"Reorder skipped {video_id!r} in playlist {playlist_id}")
                    continue
                placed.append(membership)
                seen.add(membership.id)
            placed.extend(m for m in current if m.id not in seen)

            changed = apply_order(placed)
            touch(playlist)

            logger.info(
                f"Reordered {len(ordered_video_ids)} tracks in playlist {playlist_id} ({changed} moved)",
                extra={"playlist_id": playlist_id, "owner_id": owner_id},
            )
            return to_playlist_response(db, playlist)

    def get_tracks(self, playlist_id: PlaylistId) -> List[PlaylistTrackResponse]:
        """Tracks of a playlist in position order. No ownership check."""
        playlist_id = parse_playlist_id(playlist_id)
        with self._store.session() as db:
            return load_playlist_tracks(db, playlist_id)

    def get_track_count(self, playlist_id: PlaylistId) -> int:
        """Member count; 0 if the store is unavailable"""
        playlist_id = parse_playlist_id(playlist_id)
        try:
            with self._store.session() as db:
                return db.query(func.count(PlaylistTrack.id)).filter(
                    PlaylistTrack.playlist_id == playlist_id
                ).scalar() or 0
        except StoreError as e:
            logger.warning(f"Error getting track count for playlist {playlist_id}: {e}")
            return 0

    def has_track(self, playlist_id: PlaylistId, video_id: str, owner_id: int) -> bool:
        """Whether the caller's playlist contains the track"""
        playlist_id = parse_playlist_id(playlist_id)
        owner_id = require_owner_id(owner_id)
        video_id = require_video_id(video_id)
        with self._store.session() as db:
            if find_owned_playlist(db, playlist_id, owner_id) is None:
                return False
            track = find_track(db, video_id)
            if track is None:
                return False
            return db.query(PlaylistTrack.id).filter(
                PlaylistTrack.playlist_id == playlist_id,
                PlaylistTrack.track_id == track.id,
            ).first() is not None

    def get_stats(self, playlist_id: PlaylistId, owner_id: int) -> PlaylistStats:
        """Track count and total duration of the caller's playlist"""
        playlist_id = parse_playlist_id(playlist_id)
        owner_id = require_owner_id(owner_id)
        with self._store.session() as db:
            playlist = find_owned_playlist(db, playlist_id, owner_id)
            if playlist is None:
                raise NotFoundOrAccessDenied(playlist_id)

            total_duration = db.query(func.coalesce(func.sum(Track.duration), 0)).join(
                PlaylistTrack, PlaylistTrack.track_id == Track.id
            ).filter(PlaylistTrack.playlist_id == playlist_id).scalar()
            total_duration = int(total_duration or 0)

            response = to_playlist_response(db, playlist)
            return PlaylistStats(
                playlist=response,
                track_count=len(response.tracks),
                total_duration=total_duration,
                total_duration_formatted=format_duration(total_duration),
            )
