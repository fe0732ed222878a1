# ============================================================================
# FILE: vibestream/core/errors.py
# ============================================================================
"""Error kinds raised by the playlist services.

Every error carries a stable ``code`` and the HTTP status the API layer
answers with. Messages never include another owner's data: a playlist that
exists but belongs to someone else raises the same ``NotFoundOrAccessDenied``
as a playlist that does not exist.
"""

from typing import Any, Dict, Optional


class VibeStreamError(Exception):
    """Base exception for all service errors"""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, code: Optional[str] = None, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status

    def to_response(self) -> Dict[str, Any]:
        """Convert to the REST error envelope"""
        return {"error": {"code": self.code, "message": self.message}}


class NotFoundOrAccessDenied(VibeStreamError):
    """Playlist is missing or not owned by the caller"""

    code = "PLAYLIST_NOT_FOUND"
    http_status = 404

    def __init__(self, playlist_id: Any):
        super().__init__("Playlist not found or access denied")
        self.playlist_id = playlist_id


class TrackNotFound(VibeStreamError):
    """Referenced track is not in the registry"""

    code = "TRACK_NOT_FOUND"
    http_status = 404

    def __init__(self, video_id: str):
        super().__init__(f"Track not found: {video_id}. Please save track first.")
        self.video_id = video_id


class ValidationError(VibeStreamError):
    """Malformed input"""

    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StoreError(VibeStreamError):
    """Persistence failure; the transaction was rolled back"""

    code = "STORE_ERROR"
    http_status = 503

    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(f"Database {operation} failed: {message}")
        self.operation = operation
