from vibestream.db.models.playlist import DEFAULT_COVER, Playlist, PlaylistTrack
from vibestream.db.models.track import Track

__all__ = ["DEFAULT_COVER", "Playlist", "PlaylistTrack", "Track"]
