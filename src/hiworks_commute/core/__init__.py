"""Core configuration and logging."""

from hiworks_commute.core.config import ConfigManager
from hiworks_commute.core.log import setup_logging

__all__ = ["ConfigManager", "setup_logging"]
