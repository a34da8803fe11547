"""Tests for typed views of MPD attribute sets."""

import pytest

from mpdctl.api.mpd.errors import MpdResponseError
from mpdctl.api.mpd.types import MpdStatus, MpdTrack, int_field, parse_status, parse_track


class TestParseTrack:
    """Tests for parse_track function."""

    def test_parse_full_track(self) -> None:
        """Test parsing track with all fields, in MPD's capitalization."""
        data = {
            "file": "/music/test.mp3",
            "Title": "Test Song",
            "Artist": "Test Artist",
            "Album": "Test Album",
            "AlbumArtist": "Album Artist",
            "duration": "180.5",
            "Track": "3/12",
            "Date": "2024",
            "Genre": "Rock",
            "Pos": "5",
            "Id": "42",
        }
        track = parse_track(data)
        assert track.file == "/music/test.mp3"
        assert track.title == "Test Song"
        assert track.artist == "Test Artist"
        assert track.album == "Test Album"
        assert track.album_artist == "Album Artist"
        assert track.duration == 180.5
        assert track.track == "3/12"
        assert track.pos == 5
        assert track.id == 42

    def test_parse_minimal_track(self) -> None:
        """Test parsing track with only file."""
        track = parse_track({"file": "/music/test.mp3"})
        assert track.file == "/music/test.mp3"
        assert track.title == ""
        assert track.duration == 0.0
        assert track.pos == -1

    def test_parse_empty_track(self) -> None:
        """Test parsing empty data."""
        assert parse_track({}).file == ""

    def test_invalid_number(self) -> None:
        """Test a non-numeric position."""
        with pytest.raises(MpdResponseError):
            parse_track({"file": "a.mp3", "Pos": "first"})


class TestParseStatus:
    """Tests for parse_status function."""

    def test_parse_playing_status(self) -> None:
        """Test parsing playing status."""
        data = {
            "state": "play",
            "volume": "75",
            "repeat": "1",
            "random": "0",
            "single": "0",
            "consume": "0",
            "playlistlength": "12",
            "song": "5",
            "songid": "42",
            "elapsed": "45.3",
            "duration": "180.5",
            "bitrate": "320",
            "audio": "44100:16:2",
        }
        status = parse_status(data)
        assert status.state == "play"
        assert status.volume == 75
        assert status.repeat is True
        assert status.random is False
        assert status.playlist_length == 12
        assert status.song == 5
        assert status.song_id == 42
        assert status.elapsed == 45.3
        assert status.duration == 180.5
        assert status.is_playing

    def test_parse_time_field(self) -> None:
        """Test parsing legacy elapsed:duration time field."""
        status = parse_status({"state": "pause", "time": "30:120"})
        assert status.elapsed == 30.0
        assert status.duration == 120.0
        assert status.is_paused

    def test_elapsed_preferred_over_time(self) -> None:
        """Test that precise elapsed is not overwritten by time."""
        status = parse_status({"elapsed": "30.512", "time": "30:120", "duration": "120.2"})
        assert status.elapsed == 30.512
        assert status.duration == 120.2

    def test_parse_empty_status(self) -> None:
        """Test parsing empty data."""
        status = parse_status({})
        assert status == MpdStatus()

    def test_invalid_volume(self) -> None:
        """Test a non-numeric volume."""
        with pytest.raises(MpdResponseError):
            parse_status({"volume": "loud"})


class TestIntField:
    """Tests for int_field."""

    def test_present(self) -> None:
        """Test reading an integer field."""
        assert int_field({"Id": "7"}, "Id") == 7

    def test_missing(self) -> None:
        """Test a missing field."""
        with pytest.raises(MpdResponseError):
            int_field({}, "Id")

    def test_not_integer(self) -> None:
        """Test a field that is not an integer."""
        with pytest.raises(MpdResponseError):
            int_field({"Id": "7.5"}, "Id")


class TestMpdTrackProperties:
    """Tests for MpdTrack properties."""

    def test_display_title(self) -> None:
        """Test display_title fallback."""
        assert MpdTrack(file="a.mp3", title="Song").display_title == "Song"
        assert MpdTrack(file="dir/My Song.flac").display_title == "My Song"

    def test_display_artist(self) -> None:
        """Test display_artist fallback."""
        assert MpdTrack(file="a", artist="A").display_artist == "A"
        assert MpdTrack(file="a", album_artist="B").display_artist == "B"
        assert MpdTrack(file="a").display_artist == ""


class TestMpdStatusProperties:
    """Tests for MpdStatus properties."""

    def test_progress(self) -> None:
        """Test progress calculation."""
        assert MpdStatus(elapsed=30.0, duration=120.0).progress == 0.25
        assert MpdStatus(elapsed=10.0, duration=0.0).progress == 0.0
        assert MpdStatus(elapsed=200.0, duration=100.0).progress == 1.0
