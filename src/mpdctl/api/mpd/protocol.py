"""MPD protocol formatting and parsing utilities.

MPD uses a simple line-based text protocol:
- Commands are sent as plain text lines
- Responses are key-value pairs: "key: value"
- Responses end with "OK" or "ACK [error@index] {command} message"

The parse functions here only deal with text. They take the complete block
of response lines (terminator included) and never touch the connection, so
the same input always gives the same result.

Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from types import MappingProxyType
from typing import TypeAlias

from mpdctl.api.mpd.errors import MpdArgumentError, MpdCommandError, MpdProtocolError

Attrs: TypeAlias = Mapping[str, str]

SUCCESS = "OK"
ERROR_PREFIX = "ACK"
DELIMITER = ": "

# Key that opens a new record in song listings
MARKER_KEY = "file"


def is_error(line: str) -> bool:
    """Return True for an ACK line (a key that merely starts with ACK is data)."""
    return line == ERROR_PREFIX or line.startswith(f"{ERROR_PREFIX} ")


def is_terminator(line: str) -> bool:
    """Return True if the line ends a response block."""
    return line == SUCCESS or is_error(line)


async def read_block(read_line: Callable[[], Awaitable[str]]) -> list[str]:
    """Read response lines until OK or ACK.

    Args:
        read_line: Coroutine function returning the next line without newline.

    Returns:
        List of response lines, including the final OK/ACK.
    """
    lines: list[str] = []
    while True:
        line = await read_line()
        lines.append(line)
        if is_terminator(line):
            return lines


def _check_ack(line: str) -> None:
    if is_error(line):
        raise MpdCommandError(line[len(ERROR_PREFIX) :].lstrip(" "))


def split_line(line: str) -> tuple[str, str]:
    """Split a "key: value" line.

    Raises:
        MpdProtocolError: If the line has no ": " delimiter.
    """
    key, sep, value = line.partition(DELIMITER)
    if not sep:
        raise MpdProtocolError(f"Can't parse line: {line!r}")
    return key, value


def _data_lines(lines: Iterable[str]) -> Iterable[str]:
    """Yield data lines, stopping at the terminator.

    Raises:
        MpdCommandError: On an ACK terminator.
        MpdProtocolError: If the block has no terminator.
    """
    for line in lines:
        if line == SUCCESS:
            return
        _check_ack(line)
        yield line
    raise MpdProtocolError("Response ended without OK or ACK")


def parse_attrs(lines: Iterable[str]) -> Attrs:
    """Parse a flat response block into one attribute set.

    Args:
        lines: Response lines including the final OK/ACK.

    Returns:
        Read-only mapping of key to value. Empty if the block was just "OK".

    Raises:
        MpdCommandError: If the response is an ACK error.
        MpdProtocolError: If a data line is malformed.
    """
    result: dict[str, str] = {}
    for line in _data_lines(lines):
        key, value = split_line(line)
        result[key] = value
    return MappingProxyType(result)


def parse_records(lines: Iterable[str], marker: str = MARKER_KEY) -> list[Attrs]:
    """Parse a multi-record response block (e.g. a playlist listing).

    Every line whose key equals ``marker`` starts a new record.

    Args:
        lines: Response lines including the final OK/ACK.
        marker: Key that opens a new record.

    Returns:
        Records in the order the server sent them.

    Raises:
        MpdCommandError: If the response is an ACK error.
        MpdProtocolError: If a data line is malformed or precedes the first marker.
    """
    records: list[dict[str, str]] = []
    for line in _data_lines(lines):
        key, value = split_line(line)
        if key == marker:
            records.append({})
        if not records:
            raise MpdProtocolError(f"Unexpected line before first {marker!r}: {line!r}")
        records[-1][key] = value
    return [MappingProxyType(record) for record in records]


def parse_list(lines: Iterable[str], key: str) -> list[str]:
    """Return the values of every ``key`` line, in order.

    Lines with other keys are ignored.
    """
    values: list[str] = []
    for line in _data_lines(lines):
        line_key, value = split_line(line)
        if line_key == key:
            values.append(value)
    return values


def escape_arg(arg: str | int | bool) -> str:
    """Escape an argument for MPD command.

    Integers are written in plain decimal and booleans as 1/0. Strings with
    spaces or special chars are quoted, with backslash and double-quote
    escaped inside the quotes.

    Args:
        arg: The argument to escape.

    Returns:
        Escaped argument, quoted if necessary.

    Raises:
        MpdArgumentError: If the argument contains a line break.
    """
    if isinstance(arg, bool):
        return "1" if arg else "0"
    if isinstance(arg, int):
        return str(arg)

    if "\n" in arg or "\r" in arg:
        raise MpdArgumentError(f"Argument may not contain line breaks: {arg!r}")

    # If no special characters, return as-is
    if arg and not any(c in arg for c in ' "\t\\\''):
        return arg

    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_command(command: str, *args: str | int | bool) -> str:
    """Format an MPD command with arguments.

    Args:
        command: The MPD command name.
        *args: Command arguments.

    Returns:
        Formatted command string (without newline).
    """
    if not command or not command.isascii() or any(c.isspace() for c in command):
        raise MpdArgumentError(f"Invalid command name: {command!r}")
    if not args:
        return command
    escaped_args = [escape_arg(arg) for arg in args]
    return f"{command} {' '.join(escaped_args)}"
