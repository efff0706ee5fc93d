from __future__ import annotations
import logging
import re
import shutil
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, MutableMapping, Optional, Tuple

from .env import path_variable_name
from .runner import ShellResult, run_helper

logger = logging.getLogger(__name__)

# Explicit configuration always wins over auto-detection.
EXPLICIT_VARS = ("DOCKER_HOST", "DOCKER_CERT_PATH")

EXPORT_RE = re.compile(r"^export\s*([a-zA-Z0-9_]*)=(.*)$")
LINE_SPLIT_RE = re.compile(r"[\r\n]+")

Which = Callable[..., Optional[str]]
Runner = Callable[[str, Dict[str, str]], ShellResult]


class DockerEnvStatus(Enum):
    SKIPPED = "skipped"
    CONFIGURED = "configured"
    NO_HELPER = "no_helper"
    HELPER_FAILED = "helper_failed"


@dataclass
class DockerEnvReport:
    status: DockerEnvStatus
    helper: Optional[str] = None
    applied: Dict[str, str] = field(default_factory=dict)
    skipped_lines: List[str] = field(default_factory=list)
    error: str = ""

    @property
    def configured(self) -> bool:
        return self.status is DockerEnvStatus.CONFIGURED


def parse_docker_env(stdout: str) -> Tuple[Dict[str, str], List[str]]:
    variables: Dict[str, str] = {}
    unmatched: List[str] = []
    for line in LINE_SPLIT_RE.split(stdout):
        if not line:
            continue
        m = EXPORT_RE.match(line)
        if m:
            variables[m.group(1)] = m.group(2).replace('"', "")
        else:
            unmatched.append(line)
    return variables, unmatched


def _find_helper(name: str, env: MutableMapping[str, str], which: Which, system: Optional[str]) -> Optional[str]:
    return which(name, path=env.get(path_variable_name(env, system)))


def detect_docker_env(
    env: MutableMapping[str, str],
    system: Optional[str] = None,
    which: Which = shutil.which,
    run: Runner = run_helper,
) -> DockerEnvReport:
    """Query minikube, then minishift, for docker-env and apply the result to ``env``.

    ``env`` is updated in place; nothing touches ``os.environ``. Helpers are looked
    up on the PATH-equivalent entry of ``env`` for the given ``system``.
    """
    if any(env.get(name) for name in EXPLICIT_VARS):
        logger.debug("DOCKER_HOST or DOCKER_CERT_PATH already set, skipping auto-detection")
        return DockerEnvReport(DockerEnvStatus.SKIPPED)

    helper: Optional[str] = None
    result: Optional[ShellResult] = None

    if _find_helper("minikube", env, which, system):
        helper = "minikube"
        result = run("minikube docker-env", dict(env))
        if not result.ok:
            logger.debug("minikube docker-env failed (code %s), trying minishift", result.code)

    if result is None or not result.ok:
        if _find_helper("minishift", env, which, system):
            helper = "minishift"
            result = run("minishift docker-env", dict(env))
        else:
            logger.info("No usable minikube or minishift found, docker environment not configured")
            return DockerEnvReport(
                DockerEnvStatus.NO_HELPER,
                helper=helper,
                error=result.stderr if result is not None else "",
            )

    if not result.ok:
        logger.warning("Error configuring docker via %s: %s", helper, result.stderr.strip())
        return DockerEnvReport(DockerEnvStatus.HELPER_FAILED, helper=helper, error=result.stderr)

    variables, unmatched = parse_docker_env(result.stdout)
    for line in unmatched:
        logger.debug("No match for line: %s", line)
    for name, value in variables.items():
        logger.debug("%s=%s", name, value)
        env[name] = value

    return DockerEnvReport(
        DockerEnvStatus.CONFIGURED,
        helper=helper,
        applied=variables,
        skipped_lines=unmatched,
    )


def auto_docker_env_config(
    env: MutableMapping[str, str],
    system: Optional[str] = None,
    which: Which = shutil.which,
    run: Runner = run_helper,
) -> bool:
    return detect_docker_env(env, system, which=which, run=run).configured
