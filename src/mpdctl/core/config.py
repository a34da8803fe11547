"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
DEFAULT_TIMEOUT = 10

# Settings keys
_KEY_MPD_HOST = "mpd/host"
_KEY_MPD_PORT = "mpd/port"
_KEY_MPD_TIMEOUT = "mpd/timeout"


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\mpdctl\\mpdctl
    - macOS: ~/Library/Preferences/com.mpdctl.mpdctl.plist
    - Linux: ~/.config/mpdctl/mpdctl.conf

    Example:
        config = ConfigManager()
        host, port = config.get_mpd_host(), config.get_mpd_port()
    """

    def __init__(self, organization: str = "mpdctl", application: str = "mpdctl") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- MPD settings ----------------------------------------------------------

    def get_mpd_host(self) -> str:
        """Return the MPD host.

        Returns:
            Host string or socket path (default "localhost").
        """
        value = self._settings.value(_KEY_MPD_HOST, DEFAULT_HOST, str)
        return str(value) if value else DEFAULT_HOST

    def set_mpd_host(self, host: str) -> None:
        """Set the MPD host.

        Args:
            host: Hostname, IP, or absolute Unix socket path.
        """
        self._settings.setValue(_KEY_MPD_HOST, host)

    def get_mpd_port(self) -> int:
        """Return the MPD port.

        Returns:
            Port number (default 6600).
        """
        value = self._settings.value(_KEY_MPD_PORT, DEFAULT_PORT, int)
        return max(1, min(65535, int(value)))  # type: ignore[arg-type]

    def set_mpd_port(self, port: int) -> None:
        """Set the MPD port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_MPD_PORT, max(1, min(65535, port)))

    def get_mpd_timeout(self) -> int:
        """Return the response timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        value = self._settings.value(_KEY_MPD_TIMEOUT, DEFAULT_TIMEOUT, int)
        return max(1, min(120, int(value)))  # type: ignore[arg-type]

    def set_mpd_timeout(self, seconds: int) -> None:
        """Set the response timeout.

        Args:
            seconds: Timeout in seconds (1-120).
        """
        self._settings.setValue(_KEY_MPD_TIMEOUT, max(1, min(120, seconds)))

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
        logger.debug("Settings written to %s", self._settings.fileName())
