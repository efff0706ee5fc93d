from __future__ import annotations
import asyncio
import os
from typing import Dict, Mapping, MutableMapping, Optional, Union

from .config import Settings
from .local import env as host
from .local.docker_env import auto_docker_env_config
from .local.runner import ExecOptions, ShellResult, SpawnError, exec_core, run_shell
from .local.shell_env import exec_opts


class Shell:
    """Platform queries and command execution bound to one host configuration.

    ``system`` overrides the detected OS identifier (``sys.platform`` style) and
    ``environ`` the base environment; both default to the running process.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        system: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.settings = settings or Settings()
        self.system = system
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)

    def is_windows(self) -> bool:
        return host.is_windows(self.system)

    def is_unix(self) -> bool:
        return host.is_unix(self.system)

    def platform(self) -> host.Platform:
        return host.detect_platform(self.system)

    def home(self) -> str:
        return host.home(self.environ, self.system)

    def combine_path(self, base_path: str, relative_path: str) -> str:
        return host.combine_path(base_path, relative_path, self.system)

    def file_uri(self, file_path: str) -> str:
        return host.file_uri(file_path, self.system)

    def exec_opts(self) -> ExecOptions:
        return exec_opts(self.settings, self.environ, self.system, docker_env=self.auto_docker_env_config)

    async def exec(self, cmd: str, stdin: Optional[str] = None) -> Union[ShellResult, SpawnError]:
        # docker-env helpers run synchronously; keep them off the event loop
        opts = await asyncio.get_running_loop().run_in_executor(None, self.exec_opts)
        return await run_shell(cmd, opts, stdin)

    async def exec_core(self, cmd: str, opts: ExecOptions, stdin: Optional[str] = None) -> ShellResult:
        return await exec_core(cmd, opts, stdin)

    def auto_docker_env_config(self, env: MutableMapping[str, str], system: Optional[str] = None) -> bool:
        return auto_docker_env_config(env, self.system if system is None else system)
