from __future__ import annotations
import ntpath
import os
import posixpath
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

WINDOWS = "win32"


class Platform(Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"  # shouldn't happen


_PLATFORMS = {
    "win32": Platform.WINDOWS,
    "darwin": Platform.MACOS,
    "linux": Platform.LINUX,
}


def _system(system: Optional[str]) -> str:
    return sys.platform if system is None else system


def detect_platform(system: Optional[str] = None) -> Platform:
    return _PLATFORMS.get(_system(system), Platform.UNSUPPORTED)


def is_windows(system: Optional[str] = None) -> bool:
    return _system(system) == WINDOWS


def is_unix(system: Optional[str] = None) -> bool:
    return not is_windows(system)


def home(environ: Optional[Mapping[str, str]] = None, system: Optional[str] = None) -> str:
    environ = os.environ if environ is None else environ
    home_var = "USERPROFILE" if is_windows(system) else "HOME"
    return environ.get(home_var) or str(Path.home())


def combine_path(base_path: str, relative_path: str, system: Optional[str] = None) -> str:
    separator = "/"
    if is_windows(system):
        relative_path = relative_path.replace("/", "\\")
        separator = "\\"
    return base_path + separator + relative_path


def file_uri(file_path: str, system: Optional[str] = None) -> str:
    if is_windows(system):
        return "file:///" + file_path.replace("\\", "/")
    return "file://" + file_path


def path_entry_separator(system: Optional[str] = None) -> str:
    return ";" if is_windows(system) else ":"


def path_variable_name(env: Mapping[str, str], system: Optional[str] = None) -> str:
    # Windows variable names are case-insensitive; reuse whatever casing is present
    if is_windows(system):
        for name in env:
            if name.lower() == "path":
                return name
    return "PATH"


def tool_directory(tool_path: str, system: Optional[str] = None) -> str:
    # split by the target platform's rules, not the interpreter's
    flavour = ntpath if is_windows(system) else posixpath
    return flavour.dirname(tool_path)


@dataclass
class HostEnv:
    platform: Platform
    system: str          # raw identifier, e.g. "win32" | "darwin" | "linux"
    is_wsl: bool
    home: str
    path_variable: str
    path_separator: str


def _detect_wsl(system: str) -> bool:
    if system != "linux":
        return False
    try:
        txt = Path("/proc/version").read_text(errors="ignore").lower()
    except OSError:
        return False
    return "microsoft" in txt or "wsl" in txt


def detect_env(environ: Optional[Mapping[str, str]] = None, system: Optional[str] = None) -> HostEnv:
    environ = os.environ if environ is None else environ
    system = _system(system)
    return HostEnv(
        platform=detect_platform(system),
        system=system,
        is_wsl=_detect_wsl(system),
        home=home(environ, system),
        path_variable=path_variable_name(environ, system),
        path_separator=path_entry_separator(system),
    )
