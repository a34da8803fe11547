"""Line-oriented transport over an asyncio stream.

MPD frames everything as newline-terminated UTF-8 lines. This wraps the
asyncio reader/writer pair and turns every low-level failure (EOF, OSError,
timeout, bad encoding) into an MpdConnectionError.
"""

import asyncio
import logging

from mpdctl.api.mpd.errors import MpdConnectionError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0


class LineTransport:
    """Newline-framed text connection.

    Example:
        transport = await LineTransport.open("localhost", 6600)
        await transport.write_line("ping")
        line = await transport.read_line()
        await transport.close()
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        timeout: float | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            reader: Stream to read lines from.
            writer: Stream to write lines to.
            timeout: Seconds to wait for a line before giving up, or None.
        """
        self._reader = reader
        self._writer = writer
        self._timeout = timeout

    @classmethod
    async def open(
        cls,
        host: str,
        port: int,
        timeout: float | None = None,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> "LineTransport":
        """Connect to a TCP address, or a Unix socket if host is a path.

        Args:
            host: Hostname, IP address or absolute socket path.
            port: TCP port (ignored for Unix sockets).
            timeout: Per-line read timeout in seconds.
            connect_timeout: Timeout for establishing the connection.

        Raises:
            MpdConnectionError: If the connection cannot be established.
        """
        address = host if host.startswith("/") else f"{host}:{port}"
        try:
            if host.startswith("/"):
                connection = asyncio.open_unix_connection(host)
            else:
                connection = asyncio.open_connection(host, port)
            reader, writer = await asyncio.wait_for(connection, timeout=connect_timeout)
        except TimeoutError as e:
            raise MpdConnectionError(f"Connection to {address} timed out") from e
        except OSError as e:
            raise MpdConnectionError(f"Failed to connect to {address}: {e}") from e

        logger.debug("Opened connection to %s", address)
        return cls(reader, writer, timeout)

    async def write_line(self, text: str) -> None:
        """Write one line, appending the newline.

        Raises:
            MpdConnectionError: If the write fails.
        """
        try:
            self._writer.write(f"{text}\n".encode())
            await self._writer.drain()
        except (OSError, RuntimeError) as e:
            raise MpdConnectionError(f"Write failed: {e}") from e

    async def read_line(self) -> str:
        """Read one line, without the trailing newline.

        Raises:
            MpdConnectionError: On EOF, timeout, read failure or invalid UTF-8.
        """
        try:
            raw = await asyncio.wait_for(self._reader.readline(), timeout=self._timeout)
        except TimeoutError as e:
            raise MpdConnectionError("Timed out waiting for MPD response") from e
        except (OSError, ValueError) as e:
            raise MpdConnectionError(f"Read failed: {e}") from e

        if not raw.endswith(b"\n"):
            raise MpdConnectionError("Connection closed by server")

        try:
            return raw.decode("utf-8").rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise MpdConnectionError(f"Invalid UTF-8 from server: {e}") from e

    async def close(self) -> None:
        """Close the stream. Errors during teardown are logged, not raised."""
        try:
            self._writer.close()
            await self._writer.wait_closed()
        except (OSError, TimeoutError, asyncio.CancelledError) as e:
            logger.debug("Expected error during transport close: %s", e)
        except Exception as e:  # noqa: BLE001
            logger.warning("Unexpected error during transport close: %s", e)
