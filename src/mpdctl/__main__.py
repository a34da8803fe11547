"""Command line entry point for mpdctl."""

import argparse
import asyncio
import logging
import sys

from mpdctl.api.mpd import MpdClient, MpdError, connect, parse_status, parse_track
from mpdctl.api.mpd.protocol import Attrs
from mpdctl.core.config import ConfigManager

logger = logging.getLogger(__name__)


def build_parser(config: ConfigManager) -> argparse.ArgumentParser:
    """Build the argument parser, using saved settings as defaults."""
    parser = argparse.ArgumentParser(prog="mpdctl", description="mpdctl: control an MPD server")
    parser.add_argument("--host", default=config.get_mpd_host(), help="hostname, IP or socket path")
    parser.add_argument("--port", type=int, default=config.get_mpd_port(), help="TCP port")
    parser.add_argument(
        "--timeout", type=float, default=config.get_mpd_timeout(), help="response timeout (s)",
    )
    parser.add_argument("--save", action="store_true", help="remember host/port/timeout")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="show player status")
    sub.add_parser("current", help="show the current song")
    sub.add_parser("stats", help="show database statistics")
    sub.add_parser("ping", help="check the connection")
    sub.add_parser("commands", help="list the commands this connection may use")

    playlist = sub.add_parser("playlist", help="list the current playlist")
    playlist.add_argument("start", nargs="?", type=int, default=-1)
    playlist.add_argument("end", nargs="?", type=int, default=-1)

    play = sub.add_parser("play", help="start playback")
    play.add_argument("pos", nargs="?", type=int, default=-1)

    for name, text in (
        ("pause", "pause playback"),
        ("resume", "resume playback"),
        ("stop", "stop playback"),
        ("next", "play next song"),
        ("previous", "play previous song"),
        ("clear", "clear the playlist"),
    ):
        sub.add_parser(name, help=text)

    add = sub.add_parser("add", help="add a file or directory")
    add.add_argument("uri")

    addid = sub.add_parser("addid", help="add a song and print its id")
    addid.add_argument("uri")
    addid.add_argument("pos", nargs="?", type=int, default=-1)

    delete = sub.add_parser("delete", help="delete playlist positions [start, end)")
    delete.add_argument("start", type=int)
    delete.add_argument("end", nargs="?", type=int, default=-1)

    volume = sub.add_parser("volume", help="set volume (0-100)")
    volume.add_argument("level", type=int)
    return parser


def format_song(attrs: Attrs) -> str:
    """Return a one-line description of a song record."""
    track = parse_track(attrs)
    pos = f"{track.pos:>3} " if track.pos >= 0 else ""
    if track.display_artist:
        return f"{pos}{track.display_artist} - {track.display_title}"
    return f"{pos}{track.display_title}"


async def run_command(client: MpdClient, args: argparse.Namespace) -> None:  # noqa: PLR0912
    """Issue the command selected on the command line and print the result."""
    command = args.command
    if command == "status":
        status = parse_status(await client.status())
        print(f"state: {status.state}")
        print(f"volume: {status.volume}")
        print(f"playlist: {status.playlist_length} songs")
        if status.song >= 0:
            print(f"song: {status.song + 1} ({status.elapsed:.0f}/{status.duration:.0f}s)")
    elif command == "current":
        song = await client.current_song()
        if song:
            print(format_song(song))
    elif command == "stats":
        for key, value in (await client.stats()).items():
            print(f"{key}: {value}")
    elif command == "ping":
        await client.ping()
    elif command == "commands":
        for name in await client.commands():
            print(name)
    elif command == "playlist":
        for song in await client.playlist_info(args.start, args.end):
            print(format_song(song))
    elif command == "play":
        await client.play(args.pos)
    elif command in ("pause", "resume"):
        await client.pause(command == "pause")
    elif command == "stop":
        await client.stop()
    elif command == "next":
        await client.next()
    elif command == "previous":
        await client.previous()
    elif command == "clear":
        await client.clear()
    elif command == "add":
        await client.add(args.uri)
    elif command == "addid":
        print(await client.add_id(args.uri, args.pos))
    elif command == "delete":
        await client.delete(args.start, args.end)
    elif command == "volume":
        await client.set_volume(args.level)


async def run(args: argparse.Namespace) -> None:
    """Connect, run one command and disconnect."""
    async with connect(args.host, args.port, timeout=args.timeout) as client:
        await run_command(client, args)


def main(argv: list[str] | None = None) -> int:
    """Run the mpdctl command line tool.

    Returns:
        Exit code (0 for success).
    """
    config = ConfigManager()
    args = build_parser(config).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.save:
        config.set_mpd_host(args.host)
        config.set_mpd_port(args.port)
        config.set_mpd_timeout(int(args.timeout))
        config.sync()

    try:
        asyncio.run(run(args))
    except MpdError as e:
        logger.debug("Command failed (%s): %s", e.kind, e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
