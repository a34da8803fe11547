"""Client APIs for talking to a Music Player Daemon."""

from mpdctl.api.mpd import MpdClient, MpdError, connect

__all__ = ["MpdClient", "MpdError", "connect"]
