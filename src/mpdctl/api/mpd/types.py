"""Typed views of MPD attribute sets.

The protocol layer returns plain string mappings. This module converts them
into frozen dataclasses with numeric fields for callers that want them.
"""

from dataclasses import dataclass, fields
from typing import Any

from mpdctl.api.mpd.errors import MpdResponseError
from mpdctl.api.mpd.protocol import Attrs

# MPD key name (lowercased) to dataclass field name
_TRACK_KEY_MAP: dict[str, str] = {
    "file": "file",
    "title": "title",
    "artist": "artist",
    "album": "album",
    "albumartist": "album_artist",
    "time": "duration",
    "duration": "duration",
    "track": "track",
    "pos": "pos",
    "id": "id",
}

_STATUS_KEY_MAP: dict[str, str] = {
    "state": "state",
    "volume": "volume",
    "repeat": "repeat",
    "random": "random",
    "single": "single",
    "consume": "consume",
    "playlistlength": "playlist_length",
    "song": "song",
    "songid": "song_id",
    "elapsed": "elapsed",
    "duration": "duration",
    "time": "_time",  # Special: "elapsed:duration" format
    "error": "error",
}


@dataclass(frozen=True)
class MpdTrack:
    """A song entry from currentsong or playlistinfo.

    Attributes:
        file: Path to the audio file in MPD's music directory.
        title: Track title from tags.
        artist: Artist name(s) from tags.
        album: Album name from tags.
        album_artist: Album artist (if different from track artist).
        duration: Track duration in seconds.
        track: Track number (e.g., "3" or "3/12").
        pos: Position in the current playlist.
        id: MPD song ID in the current playlist.
    """

    file: str
    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    duration: float = 0.0
    track: str = ""
    pos: int = -1
    id: int = -1

    @property
    def display_title(self) -> str:
        """Return title for display, with filename fallback."""
        if self.title:
            return self.title
        name = self.file.rsplit("/", 1)[-1]
        if "." in name:
            name = name.rsplit(".", 1)[0]
        return name

    @property
    def display_artist(self) -> str:
        """Return artist for display, falling back to album_artist if empty."""
        return self.artist or self.album_artist or ""


@dataclass(frozen=True)
class MpdStatus:
    """MPD player status.

    Attributes:
        state: Player state - "play", "pause", or "stop".
        volume: Volume level (0-100), or -1 if not available.
        repeat: Repeat mode enabled.
        random: Random/shuffle mode enabled.
        single: Single mode (stop after current track).
        consume: Consume mode (remove tracks after playing).
        playlist_length: Number of songs in the current playlist.
        song: Current song position in playlist.
        song_id: Current song ID.
        elapsed: Elapsed time in seconds.
        duration: Total duration of current track in seconds.
        error: Error message if any.
    """

    state: str = "stop"
    volume: int = -1
    repeat: bool = False
    random: bool = False
    single: bool = False
    consume: bool = False
    playlist_length: int = 0
    song: int = -1
    song_id: int = -1
    elapsed: float = 0.0
    duration: float = 0.0
    error: str = ""

    @property
    def is_playing(self) -> bool:
        """Return True if currently playing."""
        return self.state == "play"

    @property
    def is_paused(self) -> bool:
        """Return True if paused."""
        return self.state == "pause"

    @property
    def progress(self) -> float:
        """Return playback progress as a fraction (0.0 to 1.0)."""
        if self.duration <= 0:
            return 0.0
        return min(1.0, self.elapsed / self.duration)


def _convert(key: str, value: str, field_type: Any) -> Any:
    try:
        if field_type is int:
            return int(value)
        if field_type is float:
            return float(value)
    except ValueError as e:
        raise MpdResponseError(f"Field {key!r} has invalid value {value!r}") from e
    if field_type is bool:
        return value == "1"
    return value


def int_field(attrs: Attrs, key: str) -> int:
    """Return ``attrs[key]`` as an int.

    Raises:
        MpdResponseError: If the key is missing or not an integer.
    """
    if key not in attrs:
        raise MpdResponseError(f"Response did not contain {key!r}")
    result: int = _convert(key, attrs[key], int)
    return result


def parse_track(attrs: Attrs) -> MpdTrack:
    """Build an MpdTrack from a song attribute set.

    Keys are matched case-insensitively since MPD capitalizes tag names.

    Raises:
        MpdResponseError: If a numeric field cannot be parsed.
    """
    data = {key.lower(): value for key, value in attrs.items()}
    kwargs: dict[str, Any] = {}
    field_types = {f.name: f.type for f in fields(MpdTrack)}

    for mpd_key, field_name in _TRACK_KEY_MAP.items():
        if mpd_key in data:
            kwargs[field_name] = _convert(mpd_key, data[mpd_key], field_types[field_name])

    if "file" not in kwargs:
        kwargs["file"] = ""

    return MpdTrack(**kwargs)


def parse_status(attrs: Attrs) -> MpdStatus:
    """Build an MpdStatus from a status attribute set.

    Raises:
        MpdResponseError: If a numeric field cannot be parsed.
    """
    kwargs: dict[str, Any] = {}
    field_types = {f.name: f.type for f in fields(MpdStatus)}

    for mpd_key, field_name in _STATUS_KEY_MAP.items():
        if mpd_key not in attrs:
            continue

        value = attrs[mpd_key]

        # Older servers only report "time" as "elapsed:duration"
        if field_name == "_time":
            if ":" in value and "elapsed" not in kwargs:
                elapsed_str, duration_str = value.split(":", 1)
                kwargs["elapsed"] = _convert(mpd_key, elapsed_str, float)
                kwargs["duration"] = _convert(mpd_key, duration_str, float)
            continue

        kwargs[field_name] = _convert(mpd_key, value, field_types[field_name])

    return MpdStatus(**kwargs)
