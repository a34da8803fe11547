"""Command dispatch with one-response-per-command bracketing.

MPD is strictly half-duplex: after writing a command the client must read
that command's whole response block before writing the next one. The
dispatcher hands out a token per written command and only lets the reader
consume the response belonging to the most recent token.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mpdctl.api.mpd.errors import MpdClosedError
from mpdctl.api.mpd.protocol import (
    Attrs,
    format_command,
    parse_attrs,
    parse_list,
    parse_records,
    read_block,
)
from mpdctl.api.mpd.transport import LineTransport

logger = logging.getLogger(__name__)


class ResponseReader:
    """Reads the response block of a single dispatched command."""

    def __init__(self, transport: LineTransport, token: int) -> None:
        self._transport = transport
        self.token = token
        self._lines: list[str] | None = None
        self._started = False

    @property
    def finished(self) -> bool:
        """Return True once the terminator line has been read."""
        return self._lines is not None

    @property
    def started(self) -> bool:
        """Return True once reading of the block has begun."""
        return self._started

    async def lines(self) -> list[str]:
        """Return the full response block, reading it on first use."""
        if self._lines is None:
            self._started = True
            self._lines = await read_block(self._transport.read_line)
        return self._lines

    async def attrs(self) -> Attrs:
        """Read the block and decode it as one attribute set."""
        return parse_attrs(await self.lines())

    async def records(self) -> list[Attrs]:
        """Read the block and decode it as a sequence of song records."""
        return parse_records(await self.lines())

    async def values(self, key: str) -> list[str]:
        """Read the block and return the values of every ``key`` line."""
        return parse_list(await self.lines(), key)

    async def ok(self) -> None:
        """Read the block and require a successful terminator."""
        parse_attrs(await self.lines())


class CommandDispatcher:
    """Serializes commands on a transport.

    Example:
        async with dispatcher.command("status") as response:
            status = await response.attrs()
    """

    def __init__(self, transport: LineTransport) -> None:
        self._transport = transport
        self._lock = asyncio.Lock()
        self._next_token = 0
        self._reading: int | None = None
        self._closed = False

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held for the duration of one command/response exchange."""
        return self._lock

    @property
    def closed(self) -> bool:
        """Return True once the dispatcher refuses further commands."""
        return self._closed

    def close(self) -> None:
        """Refuse any further commands, including ones waiting for the lock."""
        self._closed = True

    async def send(self, command: str, *args: str | int | bool) -> int:
        """Write a command line and return its token.

        Raises:
            RuntimeError: If a previous response is still being read.
        """
        if self._reading is not None:
            raise RuntimeError(f"Response {self._reading} still pending")

        line = format_command(command, *args)
        logger.debug("MPD command: %s", line)
        await self._transport.write_line(line)

        token = self._next_token
        self._next_token += 1
        return token

    def start_response(self, token: int) -> None:
        """Mark the response for ``token`` as being read."""
        if token != self._next_token - 1 or self._reading is not None:
            raise RuntimeError(f"Response {token} is out of sequence")
        self._reading = token

    def end_response(self, token: int) -> None:
        """Mark the response for ``token`` as fully consumed."""
        if self._reading != token:
            raise RuntimeError(f"Response {token} was not started")
        self._reading = None

    @asynccontextmanager
    async def command(
        self, command: str, *args: str | int | bool
    ) -> AsyncIterator[ResponseReader]:
        """Send a command and yield a reader for its response.

        The session lock is held until the block is consumed. If the caller
        stops before the terminator, the rest of the block is drained so the
        next command starts on a clean stream. A cancellation while still
        waiting for the lock leaves the dispatcher untouched; one after the
        command went out closes it.
        """
        async with self._lock:
            if self._closed:
                raise MpdClosedError("Not connected")
            reader: ResponseReader | None = None
            try:
                token = await self.send(command, *args)
                self.start_response(token)
                reader = ResponseReader(self._transport, token)
                try:
                    yield reader
                finally:
                    try:
                        if not reader.started:
                            await reader.lines()
                    finally:
                        self.end_response(token)
            except asyncio.CancelledError:
                if reader is None or not reader.finished:
                    # Stream position is unknown
                    self._closed = True
                raise
