"""Tests for the track registry."""

import pytest

from vibestream.core.errors import TrackNotFound, ValidationError
from vibestream.db.models.playlist import DEFAULT_COVER
from vibestream.db.models.track import DEFAULT_ALBUM
from vibestream.schemas.track import TrackUpsert
from vibestream.services.track_service import TrackService

OWNER = 7


class TestUpsertTrack:
    """Tests for TrackService.upsert_track."""

    def test_create_and_find(self, track_service: TrackService) -> None:
        """Should create a track and find it by video id."""
        created = track_service.upsert_track(
            TrackUpsert(video_id="dQw4w9WgXcQ", title="Never Gonna", artist="Rick", duration=213)
        )

        assert created.id is not None
        assert created.album == DEFAULT_ALBUM
        assert created.play_count == 0
        assert created.is_downloaded is False

        found = track_service.find_by_external_id("dQw4w9WgXcQ")
        assert found is not None
        assert found.id == created.id
        assert track_service.get_track(created.id).video_id == "dQw4w9WgXcQ"

    def test_upsert_is_idempotent(self, track_service: TrackService, make_track) -> None:
        """Should update in place rather than insert a second row."""
        first = make_track(video_id="abc", title="Old Title", view_count=10)
        second = make_track(video_id="abc", title="New Title", view_count=20)

        assert second.id == first.id
        assert second.title == "New Title"
        assert second.view_count == 20
        assert len(track_service.list_tracks()) == 1

    def test_upsert_keeps_counters(self, track_service: TrackService, make_track) -> None:
        """Should preserve play count and download state across upserts."""
        make_track(video_id="abc")
        track_service.record_play("abc", OWNER)
        track_service.update_local_status("abc", "/music/abc.m4a", 4.2)

        updated = make_track(video_id="abc", title="Renamed")

        assert updated.play_count == 1
        assert updated.is_downloaded is True
        assert updated.local_path == "/music/abc.m4a"

    def test_negative_duration_rejected(self) -> None:
        """Should refuse negative durations at the schema level."""
        with pytest.raises(ValueError):
            TrackUpsert(video_id="abc", title="t", artist="a", duration=-1)

    def test_find_missing(self, track_service: TrackService) -> None:
        """Should return None for unknown ids."""
        assert track_service.find_by_external_id("nope") is None
        assert track_service.get_track(12345) is None

    def test_blank_video_id_rejected(self, track_service: TrackService) -> None:
        """Should reject a blank video id."""
        with pytest.raises(ValidationError):
            track_service.find_by_external_id("  ")


class TestListTracks:
    """Tests for TrackService.list_tracks."""

    def test_pagination(self, track_service: TrackService, make_track) -> None:
        """Should page through tracks newest first."""
        for i in range(5):
            make_track(video_id=f"v{i}")

        page = track_service.list_tracks(limit=2, offset=1)

        assert [t.video_id for t in page] == ["v3", "v2"]

    @pytest.mark.parametrize(("limit", "offset"), [(0, 0), (201, 0), (10, -1)])
    def test_bad_paging(self, track_service: TrackService, limit: int, offset: int) -> None:
        """Should reject out-of-range paging parameters."""
        with pytest.raises(ValidationError):
            track_service.list_tracks(limit=limit, offset=offset)


class TestRecordPlay:
    """Tests for TrackService.record_play."""

    def test_increments(self, track_service: TrackService, make_track) -> None:
        """Should increment the counter and stamp the play time."""
        make_track(video_id="abc")

        track_service.record_play("abc", OWNER)
        result = track_service.record_play("abc", OWNER)

        assert result.play_count == 2
        assert result.last_played_at is not None

    def test_unknown_track(self, track_service: TrackService) -> None:
        """Should raise TrackNotFound."""
        with pytest.raises(TrackNotFound):
            track_service.record_play("nope", OWNER)

    def test_owner_required(self, track_service: TrackService, make_track) -> None:
        """Should require an owner id."""
        make_track(video_id="abc")
        with pytest.raises(ValidationError):
            track_service.record_play("abc", None)


class TestDeleteTrack:
    """Tests for TrackService.delete_track."""

    def test_delete_reindexes_playlists(
        self, track_service, membership_service, playlist_service, make_playlist, make_track
    ) -> None:
        """Should drop the track from every playlist and close the gaps."""
        first = make_playlist(owner_id=OWNER, name="First")
        second = make_playlist(owner_id=OWNER, name="Second")
        make_track(video_id="a", cover_url="cov-a")
        make_track(video_id="b")
        membership_service.add_track(first.id, "a", OWNER)
        membership_service.add_track(first.id, "b", OWNER)
        membership_service.add_track(second.id, "a", OWNER)

        assert track_service.delete_track("a") is True

        first_tracks = membership_service.get_tracks(first.id)
        assert [t.video_id for t in first_tracks] == ["b"]
        assert [t.position for t in first_tracks] == [0]
        emptied = playlist_service.get_playlist(second.id, OWNER)
        assert emptied.tracks == []
        assert emptied.cover_url == DEFAULT_COVER
        assert track_service.find_by_external_id("a") is None

    def test_delete_missing(self, track_service: TrackService) -> None:
        """Should return False for an unknown track."""
        assert track_service.delete_track("nope") is False
