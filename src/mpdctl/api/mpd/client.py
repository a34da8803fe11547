"""Async MPD client.

Each MpdClient owns one connection. Commands are strictly request/response:
one command is written, its whole response block is read, then the next
command may go out. An asyncio.Lock enforces this when several tasks share
a client.

Example:
    async with connect("192.168.1.100") as client:
        status = await client.status()
        if status.get("state") == "play":
            song = await client.current_song()
            print(f"Playing: {song.get('Title')}")
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

from mpdctl.api.mpd.dispatcher import CommandDispatcher, ResponseReader
from mpdctl.api.mpd.errors import (
    MpdArgumentError,
    MpdClosedError,
    MpdConnectionError,
    MpdHandshakeError,
)
from mpdctl.api.mpd.protocol import Attrs
from mpdctl.api.mpd.transport import CONNECT_TIMEOUT, LineTransport
from mpdctl.api.mpd.types import int_field

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6600
COMMAND_TIMEOUT = 10.0
GREETING_PREFIX = "OK MPD"

STATE_CONNECTED = "connected"
STATE_CLOSED = "closed"


class MpdClient:
    """Connected MPD session.

    Instances are created by :meth:`dial` (or :func:`connect`), which only
    return once the server greeting has been validated. After :meth:`close`,
    or after any transport failure, every operation raises MpdClosedError
    without touching the connection.

    Attributes:
        host: MPD server hostname, IP or Unix socket path.
        port: MPD server port.
    """

    def __init__(
        self,
        transport: LineTransport,
        version: str,
        host: str = "",
        port: int = DEFAULT_PORT,
    ) -> None:
        """Wrap an already greeted transport.

        Args:
            transport: Line transport positioned after the greeting.
            version: Protocol version announced by the server.
            host: Server host, for logging.
            port: Server port, for logging.
        """
        self.host = host
        self.port = port
        self._transport: LineTransport | None = transport
        self._dispatcher = CommandDispatcher(transport)
        self._version = version
        self._state = STATE_CONNECTED

    @classmethod
    async def dial(
        cls,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float = COMMAND_TIMEOUT,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> Self:
        """Connect to MPD and validate the greeting.

        Args:
            host: Hostname, IP address, or absolute path of a Unix socket.
            port: TCP port.
            timeout: Seconds to wait for each response line.
            connect_timeout: Seconds to wait for the connection itself.

        Raises:
            MpdConnectionError: If the connection fails.
            MpdHandshakeError: If the server does not greet like MPD.
        """
        transport = await LineTransport.open(
            host, port, timeout=timeout, connect_timeout=connect_timeout
        )
        try:
            greeting = await transport.read_line()
            if not greeting.startswith(GREETING_PREFIX):
                raise MpdHandshakeError(f"Invalid MPD greeting: {greeting}")
        except (MpdConnectionError, asyncio.CancelledError):
            await transport.close()
            raise

        version = greeting[len(GREETING_PREFIX) :].strip()
        logger.info("Connected to MPD %s at %s:%d", version, host, port)
        return cls(transport, version, host, port)

    @property
    def state(self) -> str:
        """Return "connected" or "closed"."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Return True if the session is usable."""
        return self._state == STATE_CONNECTED

    @property
    def version(self) -> str:
        """Return MPD protocol version from initial handshake."""
        return self._version

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Send "close" and release the connection.

        Calling close on a closed session does nothing. The close command is
        best-effort; MPD hangs up without replying, so no response is read.
        Do not call this while another task has a command in flight on the
        same client.
        """
        async with self._dispatcher.lock:
            if self._transport is None:
                return

            transport = self._transport
            self._transport = None
            self._state = STATE_CLOSED
            self._dispatcher.close()
            try:
                await transport.write_line("close")
            except MpdConnectionError as e:
                logger.debug("Ignoring error sending close: %s", e)
            finally:
                await transport.close()
                logger.info("Disconnected from MPD")

    async def _mark_closed(self) -> None:
        if self._transport is not None:
            transport = self._transport
            self._transport = None
            self._state = STATE_CLOSED
            self._dispatcher.close()
            await transport.close()
            logger.warning("MPD connection to %s lost, session closed", self.host)

    @asynccontextmanager
    async def _command(
        self, cmd: str, *args: str | int | bool
    ) -> AsyncIterator[ResponseReader]:
        """Dispatch one command and yield the reader for its response.

        Raises:
            MpdClosedError: If the session is closed.
            MpdConnectionError: On transport failure (the session is closed).
        """
        if self._transport is None:
            raise MpdClosedError("Not connected")
        try:
            async with self._dispatcher.command(cmd, *args) as response:
                yield response
        except MpdConnectionError:
            # Stream position is unknown, never write to it again
            await self._mark_closed()
            raise
        except asyncio.CancelledError:
            # A task cancelled while queued for the lock leaves the session open
            if self._dispatcher.closed:
                await self._mark_closed()
            raise

    async def _ok(self, cmd: str, *args: str | int | bool) -> None:
        async with self._command(cmd, *args) as response:
            await response.ok()

    async def _attrs(self, cmd: str, *args: str | int | bool) -> Attrs:
        async with self._command(cmd, *args) as response:
            return await response.attrs()

    async def _records(self, cmd: str, *args: str | int | bool) -> list[Attrs]:
        async with self._command(cmd, *args) as response:
            return await response.records()

    async def _values(self, key: str, cmd: str, *args: str | int | bool) -> list[str]:
        async with self._command(cmd, *args) as response:
            return await response.values(key)

    # -------------------------------------------------------------------------
    # Status & Info Commands
    # -------------------------------------------------------------------------

    async def current_song(self) -> Attrs:
        """Return the attributes of the current song (empty if none)."""
        return await self._attrs("currentsong")

    async def status(self) -> Attrs:
        """Return the player status (state, volume, song, elapsed, ...)."""
        return await self._attrs("status")

    async def stats(self) -> Attrs:
        """Return database statistics (artists, albums, songs, uptime, ...)."""
        return await self._attrs("stats")

    async def ping(self) -> None:
        """Ping MPD server to check connection."""
        await self._ok("ping")

    async def commands(self) -> list[str]:
        """Return the commands the current connection may use."""
        return await self._values("command", "commands")

    # -------------------------------------------------------------------------
    # Playback Control
    # -------------------------------------------------------------------------

    async def next(self) -> None:
        """Skip to next track."""
        await self._ok("next")

    async def previous(self) -> None:
        """Skip to previous track."""
        await self._ok("previous")

    async def pause(self, state: bool) -> None:
        """Pause playback if state is True, resume otherwise."""
        await self._ok("pause", state)

    async def play(self, pos: int = -1) -> None:
        """Start playback.

        Args:
            pos: Position in playlist to start from, or -1 for current.
        """
        if pos < 0:
            await self._ok("play")
        else:
            await self._ok("play", pos)

    async def play_id(self, song_id: int = -1) -> None:
        """Play the song with the given id, or the current song if negative."""
        if song_id < 0:
            await self._ok("playid")
        else:
            await self._ok("playid", song_id)

    async def seek(self, pos: int, time: int) -> None:
        """Seek to ``time`` seconds in the song at playlist position ``pos``."""
        await self._ok("seek", pos, time)

    async def seek_id(self, song_id: int, time: int) -> None:
        """Seek to ``time`` seconds in the song with the given id."""
        await self._ok("seekid", song_id, time)

    async def stop(self) -> None:
        """Stop playback."""
        await self._ok("stop")

    async def set_volume(self, volume: int) -> None:
        """Set volume.

        Args:
            volume: Volume level, clamped to 0-100.
        """
        await self._ok("setvol", max(0, min(100, volume)))

    # -------------------------------------------------------------------------
    # Playlist Commands
    # -------------------------------------------------------------------------

    async def playlist_info(self, start: int = -1, end: int = -1) -> list[Attrs]:
        """Return song attributes from the current playlist.

        Args:
            start: First position, or negative for the whole playlist.
            end: End position (exclusive). If negative while start is not,
                only the song at ``start`` is returned.

        Raises:
            MpdArgumentError: If start is negative but end is not.
        """
        if start < 0 and end >= 0:
            raise MpdArgumentError("negative start index")
        if start >= 0 and end < 0:
            return await self._records("playlistinfo", start)

        songs = await self._records("playlistinfo")
        if start < 0:
            return songs
        return songs[start:end]

    async def delete(self, start: int, end: int = -1) -> None:
        """Delete songs from the playlist.

        Args:
            start: Position of the (first) song to delete.
            end: End position (exclusive), or negative to delete one song.

        Raises:
            MpdArgumentError: If start is negative.
        """
        if start < 0:
            raise MpdArgumentError("negative start index")
        if end < 0:
            await self._ok("delete", start)
        else:
            await self._ok("delete", f"{start}:{end}")

    async def delete_id(self, song_id: int) -> None:
        """Delete the song with the given id from the playlist."""
        await self._ok("deleteid", song_id)

    async def add(self, uri: str) -> None:
        """Add a file or directory (recursively) to the playlist."""
        await self._ok("add", uri)

    async def add_id(self, uri: str, pos: int = -1) -> int:
        """Add a song to the playlist and return its id.

        Args:
            uri: Song URI.
            pos: Playlist position to insert at, or negative to append.

        Raises:
            MpdResponseError: If MPD did not return an integer Id.
        """
        if pos >= 0:
            attrs = await self._attrs("addid", uri, pos)
        else:
            attrs = await self._attrs("addid", uri)
        return int_field(attrs, "Id")

    async def clear(self) -> None:
        """Clear the current playlist."""
        await self._ok("clear")


@asynccontextmanager
async def connect(
    host: str,
    port: int = DEFAULT_PORT,
    timeout: float = COMMAND_TIMEOUT,
) -> AsyncIterator[MpdClient]:
    """Open an MpdClient that is closed when the block exits."""
    client = await MpdClient.dial(host, port, timeout=timeout)
    try:
        yield client
    finally:
        await client.close()
