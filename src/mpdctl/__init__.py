"""mpdctl: asyncio client and command line tool for MPD."""

__version__ = "0.1.0"
