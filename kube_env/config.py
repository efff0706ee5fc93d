from __future__ import annotations
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

# Tools whose configured location is put on PATH, in this order.
TOOLS = ("kubectl", "helm", "draft")

SECTION = "vs-kubernetes"
KUBECONFIG_SETTING = f"{SECTION}.kubeconfig"

SETTINGS_FILE_ENV = "KUBE_ENV_SETTINGS"
WORKSPACE_ENV = "KUBE_ENV_WORKSPACE"
KUBECONFIG_ENV = "KUBE_ENV_KUBECONFIG"


def tool_setting(tool: str) -> str:
    return f"{SECTION}.{tool}-path"


def tool_env_var(tool: str) -> str:
    return f"KUBE_ENV_{tool.upper()}_PATH"


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    kubectl_path: Optional[str] = None
    helm_path: Optional[str] = None
    draft_path: Optional[str] = None
    kubeconfig: Optional[str] = None
    workspace_root: Optional[str] = None

    def tool_path(self, tool: str) -> Optional[str]:
        if tool not in TOOLS:
            raise KeyError(f"unknown tool: {tool}")
        return getattr(self, f"{tool}_path")


def _check_string(section: Dict[str, Any], key: str, path: Path) -> None:
    value = section.get(key)
    if value is not None and not isinstance(value, str):
        raise SettingsError(f'"{key}" in {path} must be a string, got {type(value).__name__}')


def _read_settings_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SettingsError(f"cannot read settings file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"invalid JSON in settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"settings file {path} must contain a JSON object")
    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise SettingsError(f'"{SECTION}" in {path} must be an object')

    for tool in TOOLS:
        _check_string(section, tool_setting(tool), path)
    _check_string(section, KUBECONFIG_SETTING, path)
    return section


def load_settings(
    settings_file: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build Settings from an optional JSON settings file, then environment overrides.

    The file uses the editor-style layout::

        {"vs-kubernetes": {"vs-kubernetes.kubectl-path": "/opt/bin/kubectl", ...}}

    ``KUBE_ENV_*`` variables win over the file. Empty values count as unset.
    """
    environ = os.environ if environ is None else environ
    if settings_file is None and environ.get(SETTINGS_FILE_ENV):
        settings_file = environ[SETTINGS_FILE_ENV]

    section: Dict[str, Any] = {}
    if settings_file is not None:
        section = _read_settings_file(Path(settings_file))

    values: Dict[str, Optional[str]] = {}
    for tool in TOOLS:
        values[f"{tool}_path"] = environ.get(tool_env_var(tool)) or section.get(tool_setting(tool)) or None
    values["kubeconfig"] = environ.get(KUBECONFIG_ENV) or section.get(KUBECONFIG_SETTING) or None
    values["workspace_root"] = environ.get(WORKSPACE_ENV) or None

    return Settings(**values)
