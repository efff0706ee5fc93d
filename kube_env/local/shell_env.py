from __future__ import annotations
import logging
import os
from typing import Callable, Dict, Mapping, MutableMapping, Optional

from ..config import TOOLS, Settings
from .docker_env import auto_docker_env_config
from .env import home, is_windows, path_entry_separator, path_variable_name, tool_directory
from .runner import ExecOptions

logger = logging.getLogger(__name__)

DockerEnvHook = Callable[[MutableMapping[str, str], Optional[str]], bool]


def shell_environment(
    base_env: Mapping[str, str],
    settings: Settings,
    system: Optional[str] = None,
    docker_env: DockerEnvHook = auto_docker_env_config,
) -> Dict[str, str]:
    env = dict(base_env)
    path_var = path_variable_name(env, system)
    docker_checked = False

    for tool in TOOLS:
        tool_path = settings.tool_path(tool)
        if not tool_path:
            continue
        if not docker_checked:
            docker_checked = True
            docker_env(env, system)
        directory = tool_directory(tool_path, system)
        current = env.get(path_var)
        env[path_var] = f"{directory}{path_entry_separator(system)}{current}" if current else directory
        logger.debug("Added %s directory %s to %s", tool, directory, path_var)

    if settings.kubeconfig:
        env["KUBECONFIG"] = settings.kubeconfig

    return env


def exec_opts(
    settings: Settings,
    base_env: Optional[Mapping[str, str]] = None,
    system: Optional[str] = None,
    docker_env: DockerEnvHook = auto_docker_env_config,
) -> ExecOptions:
    env = dict(os.environ if base_env is None else base_env)
    if is_windows(system):
        env["HOME"] = home(env, system)
    env = shell_environment(env, settings, system, docker_env=docker_env)
    return ExecOptions(
        cwd=settings.workspace_root or os.getcwd(),
        env=env,
        asynchronous=True,
    )
