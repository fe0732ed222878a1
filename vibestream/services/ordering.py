# ============================================================================
# FILE: vibestream/services/ordering.py
# ============================================================================
"""Position primitives for playlist memberships.

All helpers take the caller's session and must run inside a unit of work
(``DatabaseSessionManager.atomic``). After every mutating operation the
positions of a playlist with N members are exactly 0..N-1.
"""

from datetime import timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from vibestream.core.errors import NotFoundOrAccessDenied
from vibestream.db.base import utcnow
from vibestream.db.models.playlist import DEFAULT_COVER, Playlist, PlaylistTrack


def find_owned_playlist(db: Session, playlist_id: int, owner_id: int, lock: bool = False) -> Optional[Playlist]:
    """Owner-scoped lookup; a foreign playlist looks exactly like a missing one"""
    query = db.query(Playlist).filter(
        Playlist.id == playlist_id,
        Playlist.user_id == owner_id,
    )
    if lock:
        query = query.with_for_update()
    return query.first()


def lock_owned_playlist(db: Session, playlist_id: int, owner_id: int) -> Playlist:
    """Owner-scoped lookup that row-locks the playlist for the rest of the transaction"""
    playlist = find_owned_playlist(db, playlist_id, owner_id, lock=True)
    if playlist is None:
        raise NotFoundOrAccessDenied(playlist_id)
    return playlist


def next_position(db: Session, playlist_id: int) -> int:
    """max(position) + 1, or 0 for an empty playlist"""
    max_pos = db.query(func.coalesce(func.max(PlaylistTrack.position), -1)).filter(
        PlaylistTrack.playlist_id == playlist_id
    ).scalar()
    return int(max_pos) + 1


def ordered_memberships(db: Session, playlist_id: int) -> List[PlaylistTrack]:
    """Memberships in playlist order; ties broken by insertion order"""
    return (
        db.query(PlaylistTrack)
        .filter(PlaylistTrack.playlist_id == playlist_id)
        .order_by(PlaylistTrack.position.asc(), PlaylistTrack.id.asc())
        .all()
    )


def apply_order(memberships: List[PlaylistTrack]) -> int:
    """Assign positions 0..N-1 following list order. Returns rows changed."""
    changed = 0
    for index, membership in enumerate(memberships):
        if membership.position != index:
            membership.position = index
            changed += 1
    return changed


def reindex_playlist(db: Session, playlist_id: int) -> int:
    """Close gaps left by removals, keeping relative order. Returns member count."""
    memberships = ordered_memberships(db, playlist_id)
    apply_order(memberships)
    db.flush()
    return len(memberships)


def touch(playlist: Playlist) -> None:
    """Advance updated_at, strictly, even within the same clock tick"""
    now = utcnow()
    if playlist.updated_at is not None and now <= playlist.updated_at:
        now = playlist.updated_at + timedelta(microseconds=1)
    playlist.updated_at = now


def reset_cover(playlist: Playlist) -> None:
    playlist.cover_url = DEFAULT_COVER
    touch(playlist)
