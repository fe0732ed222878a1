"""Tests for public id helpers."""

import pytest

from vibestream.core.errors import ValidationError
from vibestream.core.ids import format_playlist_id, parse_playlist_id, require_owner_id


class TestPlaylistIds:
    @pytest.mark.parametrize(("value", "expected"), [("p12", 12), ("12", 12), (12, 12), (" p3 ", 3)])
    def test_parse(self, value, expected: int) -> None:
        assert parse_playlist_id(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "p", "pp1", "12a", "-1", 0, -4, True, "1.5", "p²", "²", "p99999999999999999999", 2**31],
    )
    def test_parse_rejects(self, value) -> None:
        with pytest.raises(ValidationError):
            parse_playlist_id(value)

    def test_format(self) -> None:
        assert format_playlist_id(42) == "p42"
        assert parse_playlist_id(format_playlist_id(42)) == 42


class TestOwnerIds:
    @pytest.mark.parametrize(("value", "expected"), [(7, 7), ("7", 7), (2**31 - 1, 2**31 - 1)])
    def test_accepts(self, value, expected: int) -> None:
        assert require_owner_id(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", 0, -3, False, "99999999999999999999", 2**31])
    def test_rejects(self, value) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_owner_id(value)
        assert exc_info.value.field == "owner_id"
