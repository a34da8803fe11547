"""MPD client error types.

Each error carries a ``kind`` tag so callers can pick a recovery strategy
without matching on class names:

- ``transport``: the connection is unusable (fatal to the session).
- ``closed``: the session was already closed; nothing was sent.
- ``handshake``: the server greeting was missing or invalid.
- ``ack``: the server rejected the command; the session stays usable.
- ``malformed``: the response did not match the protocol grammar.
- ``validation``: caller arguments were rejected before any I/O.
- ``shape``: the command succeeded but the response lacked an expected field.
"""

import re

# ACK [error@command_listNum] {current_command} message_text
ACK_PATTERN = re.compile(r"\[(\d+)@(\d+)\] \{(\w*)\} ?(.*)")


class MpdError(Exception):
    """Base class for all MPD client errors."""

    kind: str = "error"


class MpdConnectionError(MpdError):
    """Connection to the MPD server failed or was lost."""

    kind = "transport"


class MpdClosedError(MpdConnectionError):
    """Operation attempted on a closed session."""

    kind = "closed"


class MpdHandshakeError(MpdConnectionError):
    """Server greeting was missing or did not look like MPD."""

    kind = "handshake"


class MpdCommandError(MpdError):
    """MPD rejected a command with an ACK line.

    Attributes:
        message: Everything after ``ACK `` on the terminator line, verbatim.
        code: MPD error code, or 0 if the line was not in the usual format.
        index: Position within a command list (always 0 outside lists).
        command: Name of the command MPD reported as failing.
        text: Human-readable part of the message.
    """

    kind = "ack"

    def __init__(self, message: str) -> None:
        self.message = message
        self.code = 0
        self.index = 0
        self.command = ""
        self.text = message

        match = ACK_PATTERN.fullmatch(message)
        if match:
            self.code = int(match.group(1))
            self.index = int(match.group(2))
            self.command = match.group(3)
            self.text = match.group(4)
        super().__init__(message)


class MpdProtocolError(MpdError):
    """Response did not match the expected line grammar."""

    kind = "malformed"


class MpdArgumentError(MpdError, ValueError):
    """Caller-supplied arguments were rejected before sending anything."""

    kind = "validation"


class MpdResponseError(MpdError):
    """Command succeeded but the response lacked a required field."""

    kind = "shape"
