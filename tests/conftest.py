"""Test fixtures and configuration for vibestream tests.

This module provides shared fixtures organized into:
- Database fixtures: a file-backed SQLite store per test
- Service fixtures: services wired to that store
- Factory fixtures: builders for tracks and playlists
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from vibestream.db.session import DatabaseSessionManager
from vibestream.main import create_app
from vibestream.schemas.playlist import PlaylistCreate, PlaylistResponse
from vibestream.schemas.track import TrackResponse, TrackUpsert
from vibestream.services.membership_service import MembershipService
from vibestream.services.playlist_service import PlaylistService
from vibestream.services.track_service import TrackService

if TYPE_CHECKING:
    from collections.abc import Callable


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def store(tmp_path: Path) -> Generator[DatabaseSessionManager, None, None]:
    """Create a SQLite store in a temporary file.

    A file (rather than :memory:) gives every session its own connection,
    which is what the transactional code paths expect.
    """
    store = DatabaseSessionManager.from_url(
        f"sqlite:///{tmp_path / 'test.db'}", timeout_seconds=30.0
    )
    store.create_all()
    yield store
    store.dispose()


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def track_service(store: DatabaseSessionManager) -> TrackService:
    return TrackService(store)


@pytest.fixture
def playlist_service(store: DatabaseSessionManager) -> PlaylistService:
    return PlaylistService(store)


@pytest.fixture
def membership_service(store: DatabaseSessionManager) -> MembershipService:
    return MembershipService(store)


@pytest.fixture
def client(store: DatabaseSessionManager) -> TestClient:
    """API client bound to the test store (lifespan not run)."""
    return TestClient(create_app(store))


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def make_track(track_service: TrackService) -> Callable[..., TrackResponse]:
    """Factory that saves a track to the registry."""

    def _make_track(
        video_id: str = "vid00000001",
        title: str = "Test Song",
        artist: str = "Test Artist",
        cover_url: str | None = None,
        duration: int = 180,
        **kwargs: object,
    ) -> TrackResponse:
        return track_service.upsert_track(
            TrackUpsert(
                video_id=video_id,
                title=title,
                artist=artist,
                cover_url=cover_url,
                duration=duration,
                **kwargs,
            )
        )

    return _make_track


@pytest.fixture
def make_playlist(playlist_service: PlaylistService) -> Callable[..., PlaylistResponse]:
    """Factory that creates a playlist for an owner."""

    def _make_playlist(
        owner_id: int = 7,
        name: str = "Test Playlist",
        description: str | None = None,
        cover_url: str | None = None,
    ) -> PlaylistResponse:
        return playlist_service.create_playlist(
            owner_id,
            PlaylistCreate(name=name, description=description, cover_url=cover_url),
        )

    return _make_playlist
