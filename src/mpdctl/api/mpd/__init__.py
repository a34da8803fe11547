"""MPD client module.

This module provides an async client for the MPD text protocol: one
command, one response block, decoded into attribute sets.

Example:
    from mpdctl.api.mpd import connect

    async with connect("192.168.1.100") as client:
        status = await client.status()
        songs = await client.playlist_info()
"""

from mpdctl.api.mpd.client import MpdClient, connect
from mpdctl.api.mpd.errors import (
    MpdArgumentError,
    MpdClosedError,
    MpdCommandError,
    MpdConnectionError,
    MpdError,
    MpdHandshakeError,
    MpdProtocolError,
    MpdResponseError,
)
from mpdctl.api.mpd.protocol import Attrs
from mpdctl.api.mpd.types import MpdStatus, MpdTrack, parse_status, parse_track

__all__ = [
    "Attrs",
    "MpdClient",
    "connect",
    "MpdError",
    "MpdArgumentError",
    "MpdClosedError",
    "MpdCommandError",
    "MpdConnectionError",
    "MpdHandshakeError",
    "MpdProtocolError",
    "MpdResponseError",
    "MpdStatus",
    "MpdTrack",
    "parse_status",
    "parse_track",
]
