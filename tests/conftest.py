"""Test fixtures for mpdctl tests."""

import asyncio
from collections.abc import Callable

import pytest

GREETING = b"OK MPD 0.23.5\n"


class MockStreamReader:
    """Mock asyncio StreamReader for testing.

    Responses are concatenated and handed out line by line. Once exhausted,
    readline returns b"" like a closed socket. Setting ``gate`` to an
    asyncio.Event holds every read until the event is set.
    """

    def __init__(self, responses: list[bytes], yield_control: bool = False) -> None:
        self._responses = responses
        self._index = 0
        self._buffer = b""
        self._yield_control = yield_control
        self.gate: asyncio.Event | None = None

    async def readline(self) -> bytes:
        """Read a line from mock data."""
        if self.gate is not None:
            await self.gate.wait()
        if self._yield_control:
            await asyncio.sleep(0)
        while b"\n" not in self._buffer:
            if self._index >= len(self._responses):
                rest, self._buffer = self._buffer, b""
                return rest
            self._buffer += self._responses[self._index]
            self._index += 1

        line, self._buffer = self._buffer.split(b"\n", 1)
        return line + b"\n"


class MockStreamWriter:
    """Mock asyncio StreamWriter for testing."""

    def __init__(self, fail_writes: bool = False) -> None:
        self.data: list[bytes] = []
        self._closed = False
        self._fail_writes = fail_writes

    def write(self, data: bytes) -> None:
        """Record written data."""
        if self._fail_writes:
            raise ConnectionResetError("Connection reset by peer")
        self.data.append(data)

    async def drain(self) -> None:
        """Mock drain."""

    def close(self) -> None:
        """Mark as closed."""
        self._closed = True

    async def wait_closed(self) -> None:
        """Mock wait_closed."""

    def is_closing(self) -> bool:
        """Check if closing."""
        return self._closed


MockConnection = Callable[..., tuple[MockStreamReader, MockStreamWriter]]


@pytest.fixture
def mock_connection() -> MockConnection:
    """Create mock reader/writer pairs for testing."""

    def _mock_connection(
        responses: list[bytes],
        yield_control: bool = False,
        fail_writes: bool = False,
    ) -> tuple[MockStreamReader, MockStreamWriter]:
        reader = MockStreamReader(responses, yield_control=yield_control)
        writer = MockStreamWriter(fail_writes=fail_writes)
        return reader, writer

    return _mock_connection
