from __future__ import annotations
import asyncio
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecOptions:
    cwd: str
    env: Dict[str, str] = field(default_factory=dict)
    asynchronous: bool = True


@dataclass(frozen=True)
class ShellResult:
    code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.code == 0 and not self.stderr


@dataclass(frozen=True)
class SpawnError:
    """The command could not be started at all (bad cwd, missing shell, ...)."""
    command: str
    reason: str


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


async def exec_core(cmd: str, opts: ExecOptions, stdin: Optional[str] = None) -> ShellResult:
    proc = await asyncio.create_subprocess_shell(
        cmd,
        cwd=opts.cwd,
        env=opts.env,
        stdin=asyncio.subprocess.PIPE if stdin else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    out, err = await proc.communicate(stdin.encode("utf-8") if stdin else None)
    return ShellResult(proc.returncode, _decode(out), _decode(err))


async def run_shell(cmd: str, opts: ExecOptions, stdin: Optional[str] = None) -> Union[ShellResult, SpawnError]:
    try:
        return await exec_core(cmd, opts, stdin)
    except OSError as e:
        logger.error("Failed to start %r: %s", cmd, e)
        return SpawnError(cmd, f"{type(e).__name__}: {e}")


def run_helper(cmd: str, env: Dict[str, str]) -> ShellResult:
    # silent: output is captured, never echoed
    p = subprocess.run(cmd, shell=True, capture_output=True, text=True, env=env)
    return ShellResult(p.returncode, p.stdout, p.stderr)
