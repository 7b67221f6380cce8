"""Platform-specific locations for the worker runtime and app data."""

import platform
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

APP_DIR_NAME = ".hiworks-commute"


class Platform(Enum):
    """Supported platforms."""

    LINUX = "linux"
    MACOS = "darwin"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


def get_platform() -> Platform:
    """Detect the current platform.

    Returns:
        Platform enum value
    """
    system = platform.system().lower()
    if system == "linux":
        return Platform.LINUX
    elif system == "darwin":
        return Platform.MACOS
    elif system == "windows":
        return Platform.WINDOWS
    else:
        return Platform.UNKNOWN


def get_app_home(home: Optional[Path] = None) -> Path:
    """Get the per-user application directory (not created)."""
    return (home or Path.home()) / APP_DIR_NAME


def get_log_file_path() -> Path:
    """Get the application log file path.

    Returns:
        Path to log file
    """
    log_dir = get_app_home() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "hiworks-commute.log"


def get_executable_dir() -> Path:
    """Get the directory of the running application.

    For a frozen bundle this is the directory holding the executable,
    otherwise the directory of the launching script.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()


def runtime_executable_name(plat: Optional[Platform] = None) -> str:
    """Get the file name of the worker runtime executable."""
    plat = plat or get_platform()
    if plat == Platform.WINDOWS:
        return "node.exe"
    return "node"


def well_known_runtime_paths(plat: Optional[Platform] = None) -> list[Path]:
    """Get system install locations checked for the runtime, in order.

    Returns:
        Candidate runtime executable paths
    """
    plat = plat or get_platform()

    if plat == Platform.MACOS:
        return [
            Path("/opt/homebrew/bin/node"),
            Path("/usr/local/bin/node"),
            Path("/usr/bin/node"),
        ]
    elif plat == Platform.LINUX:
        return [
            Path("/usr/local/bin/node"),
            Path("/usr/bin/node"),
            Path("/snap/bin/node"),
        ]
    elif plat == Platform.WINDOWS:
        return [
            Path(r"C:\Program Files\nodejs\node.exe"),
            Path(r"C:\Program Files (x86)\nodejs\node.exe"),
        ]
    return []
