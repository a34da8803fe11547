"""Application support layer.

Classes:
    ConfigManager: QSettings wrapper for connection defaults.
"""

from mpdctl.core.config import ConfigManager

__all__ = ["ConfigManager"]
