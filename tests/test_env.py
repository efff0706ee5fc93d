"""Tests for kube_env/local/env.py."""

from pathlib import Path
from unittest import mock

import pytest

from kube_env.local.env import (
    Platform,
    combine_path,
    detect_env,
    detect_platform,
    file_uri,
    home,
    is_unix,
    is_windows,
    path_entry_separator,
    path_variable_name,
    tool_directory,
)


class TestDetectPlatform:
    @pytest.mark.parametrize("system,expected", [
        ("win32", Platform.WINDOWS),
        ("darwin", Platform.MACOS),
        ("linux", Platform.LINUX),
    ])
    def test_known_systems(self, system, expected):
        assert detect_platform(system) is expected

    @pytest.mark.parametrize("system", ["freebsd12", "aix", "cygwin", ""])
    def test_unknown_system_is_unsupported(self, system):
        assert detect_platform(system) is Platform.UNSUPPORTED

    def test_defaults_to_running_interpreter(self):
        assert detect_platform() in set(Platform)

    def test_windows_and_unix_are_complementary(self):
        assert is_windows("win32") and not is_unix("win32")
        assert is_unix("linux") and not is_windows("linux")
        assert is_unix("darwin")


class TestPaths:
    def test_combine_path_unix(self):
        assert combine_path("/a", "b/c", "linux") == "/a/b/c"

    def test_combine_path_windows_rewrites_slashes(self):
        assert combine_path("/a", "b/c", "win32") == "/a\\b\\c"

    def test_combine_path_unix_keeps_backslashes(self):
        assert combine_path("/a", "b\\c", "darwin") == "/a/b\\c"

    def test_file_uri_unix(self):
        assert file_uri("/a/b", "linux") == "file:///a/b"
        assert file_uri("/tmp/x", "darwin") == "file:///tmp/x"

    def test_file_uri_windows(self):
        assert file_uri("C:\\a\\b", "win32") == "file:///C:/a/b"

    def test_path_entry_separator(self):
        assert path_entry_separator("win32") == ";"
        assert path_entry_separator("linux") == ":"

    def test_tool_directory_uses_target_platform_rules(self):
        assert tool_directory("C:\\tools\\kube\\kubectl.exe", "win32") == "C:\\tools\\kube"
        assert tool_directory("/usr/local/bin/helm", "linux") == "/usr/local/bin"


class TestHome:
    def test_unix_reads_home(self):
        assert home({"HOME": "/home/dev", "USERPROFILE": "C:\\x"}, "linux") == "/home/dev"

    def test_windows_reads_userprofile(self):
        assert home({"HOME": "/home/dev", "USERPROFILE": "C:\\Users\\dev"}, "win32") == "C:\\Users\\dev"

    def test_falls_back_to_path_home(self):
        assert home({}, "linux") == str(Path.home())


class TestPathVariableName:
    def test_windows_finds_key_case_insensitively(self):
        assert path_variable_name({"Path": "C:\\Windows", "TEMP": "x"}, "win32") == "Path"

    def test_windows_without_path_key(self):
        assert path_variable_name({"TEMP": "x"}, "win32") == "PATH"

    def test_unix_is_always_literal_path(self):
        assert path_variable_name({"Path": "/bin"}, "linux") == "PATH"


class TestDetectEnv:
    def test_snapshot_for_darwin(self):
        h = detect_env({"HOME": "/Users/dev", "PATH": "/bin"}, "darwin")
        assert h.platform is Platform.MACOS
        assert h.system == "darwin"
        assert h.is_wsl is False
        assert h.home == "/Users/dev"
        assert h.path_variable == "PATH"
        assert h.path_separator == ":"

    def test_wsl_flag_from_proc_version(self):
        with mock.patch.object(Path, "read_text", return_value="Linux version 5.15.90.1-microsoft-standard-WSL2"):
            assert detect_env({"HOME": "/home/dev"}, "linux").is_wsl is True

    def test_unreadable_proc_version_is_not_wsl(self):
        with mock.patch.object(Path, "read_text", side_effect=OSError("no /proc")):
            assert detect_env({"HOME": "/home/dev"}, "linux").is_wsl is False

    def test_snapshot_for_windows(self):
        h = detect_env({"USERPROFILE": "C:\\Users\\dev", "pAtH": "C:\\bin"}, "win32")
        assert h.platform is Platform.WINDOWS
        assert h.path_variable == "pAtH"
        assert h.path_separator == ";"
