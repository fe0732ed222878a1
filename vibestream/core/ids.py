# ============================================================================
# FILE: vibestream/core/ids.py
# ============================================================================
from typing import Union

from vibestream.core.errors import ValidationError

PLAYLIST_ID_PREFIX = "p"

# Upper bound of the Integer key columns
MAX_DB_ID = 2**31 - 1


def format_playlist_id(db_id: int) -> str:
    """Internal key -> public id ("p12")"""
    return f"{PLAYLIST_ID_PREFIX}{db_id}"


def parse_playlist_id(value: Union[str, int]) -> int:
    """
    Public id -> internal key.
    Accepts "p12", "12" or 12; anything else is a ValidationError.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid playlist id: {value!r}", field="playlist_id")
    if isinstance(value, int):
        db_id = value
    else:
        raw = str(value).strip()
        if raw.startswith(PLAYLIST_ID_PREFIX):
            raw = raw[len(PLAYLIST_ID_PREFIX):]
        if not (raw.isascii() and raw.isdigit()):
            raise ValidationError(f"Invalid playlist id: {value!r}", field="playlist_id")
        db_id = int(raw)
    if db_id <= 0 or db_id > MAX_DB_ID:
        raise ValidationError(f"Invalid playlist id: {value!r}", field="playlist_id")
    return db_id


def require_owner_id(owner_id) -> int:
    """Owner ids come from the identity provider and must be positive ints"""
    if owner_id is None or isinstance(owner_id, bool):
        raise ValidationError("User ID is required", field="owner_id")
    try:
        value = int(owner_id)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid user ID: {owner_id!r}", field="owner_id")
    if value <= 0 or value > MAX_DB_ID:
        raise ValidationError(f"Invalid user ID: {owner_id!r}", field="owner_id")
    return value
