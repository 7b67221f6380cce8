"""Tests for platform helpers."""

import platform
import sys
from pathlib import Path
from unittest.mock import patch

from hiworks_commute.worker.platform import (
    APP_DIR_NAME,
    Platform,
    get_app_home,
    get_executable_dir,
    get_log_file_path,
    get_platform,
    runtime_executable_name,
    well_known_runtime_paths,
)


class TestPlatformDetection:
    """Test platform detection."""

    def test_get_platform_matches_system(self) -> None:
        """Test platform detection matches system platform."""
        plat = get_platform()
        system = platform.system().lower()

        if system == "linux":
            assert plat == Platform.LINUX
        elif system == "darwin":
            assert plat == Platform.MACOS
        elif system == "windows":
            assert plat == Platform.WINDOWS

    @patch("hiworks_commute.worker.platform.platform.system", return_value="Plan9")
    def test_unknown_platform(self, mock_system) -> None:
        assert get_platform() == Platform.UNKNOWN


class TestPaths:
    """Test path helpers."""

    def test_app_home(self, tmp_path: Path) -> None:
        assert get_app_home(tmp_path) == tmp_path / APP_DIR_NAME

    def test_log_file_path(self, tmp_path: Path, monkeypatch) -> None:
        """Test the log directory is created under the app home."""
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        path = get_log_file_path()

        assert path.parent == tmp_path / APP_DIR_NAME / "logs"
        assert path.parent.is_dir()

    def test_executable_dir_frozen(self, tmp_path: Path, monkeypatch) -> None:
        """Test a frozen bundle uses the executable directory."""
        exe = tmp_path / "HiworksCommute"
        exe.write_text("")
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(exe))

        assert get_executable_dir() == tmp_path.resolve()

    def test_executable_dir_script(self, tmp_path: Path, monkeypatch) -> None:
        """Test a script launch uses the script directory."""
        monkeypatch.setattr(sys, "argv", [str(tmp_path / "hiworks-commute")])

        assert get_executable_dir() == tmp_path.resolve()


class TestRuntime:
    """Test runtime naming and search paths."""

    def test_runtime_name(self) -> None:
        assert runtime_executable_name(Platform.LINUX) == "node"
        assert runtime_executable_name(Platform.MACOS) == "node"
        assert runtime_executable_name(Platform.WINDOWS) == "node.exe"

    def test_well_known_paths(self) -> None:
        """Test every supported platform has search paths."""
        for plat in (Platform.LINUX, Platform.MACOS, Platform.WINDOWS):
            paths = well_known_runtime_paths(plat)
            assert paths
            assert all(str(p).endswith(("node", "node.exe")) for p in paths)

    def test_unknown_platform_has_no_paths(self) -> None:
        assert well_known_runtime_paths(Platform.UNKNOWN) == []
