import argparse
import asyncio
import logging
import os
import shlex
import sys
from dataclasses import replace

from dotenv import load_dotenv

from .config import SettingsError, load_settings
from .local.docker_env import DockerEnvStatus, detect_docker_env
from .local.env import detect_env
from .local.runner import SpawnError
from .shell import Shell


def _export_line(name: str, value: str) -> str:
    return f"export {name}={shlex.quote(value)}"


def _cmd_info(shell: Shell) -> int:
    h = detect_env(shell.environ, shell.system)
    print(f"platform: {h.platform.value}")
    print(f"system: {h.system}")
    print(f"wsl: {'yes' if h.is_wsl else 'no'}")
    print(f"home: {h.home}")
    print(f"path_variable: {h.path_variable}")
    print(f"path_separator: {h.path_separator}")
    return 0


def _cmd_env(shell: Shell, shell_export: bool) -> int:
    opts = shell.exec_opts()
    for name in sorted(opts.env):
        value = opts.env[name]
        if shell.environ.get(name) == value:
            continue
        print(_export_line(name, value) if shell_export else f"{name}={value}")
    return 0


def _cmd_docker_env(shell: Shell) -> int:
    env = dict(shell.environ)
    report = detect_docker_env(env, system=shell.system)

    if report.status is DockerEnvStatus.SKIPPED:
        print("DOCKER_HOST or DOCKER_CERT_PATH already set; nothing to do", file=sys.stderr)
        return 0
    if report.status is DockerEnvStatus.NO_HELPER:
        print("Neither minikube nor minishift is available", file=sys.stderr)
        return 1
    if report.status is DockerEnvStatus.HELPER_FAILED:
        print(f"{report.helper} docker-env failed: {report.error.strip()}", file=sys.stderr)
        return 1

    for name, value in report.applied.items():
        print(_export_line(name, value))
    return 0


def _cmd_exec(shell: Shell, command: str, stdin: str) -> int:
    res = asyncio.run(shell.exec(command, stdin or None))
    if isinstance(res, SpawnError):
        print(f"Could not run {res.command!r}: {res.reason}", file=sys.stderr)
        return 127
    if res.stdout:
        sys.stdout.write(res.stdout)
    if res.stderr:
        sys.stderr.write(res.stderr)
    return res.code


def main(argv=None) -> None:
    load_dotenv()

    ap = argparse.ArgumentParser(prog="kube-env")
    ap.add_argument("--settings", type=str, default=None, help="JSON settings file with a vs-kubernetes section")
    ap.add_argument("--workspace", type=str, default=None, help="working directory for executed commands")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("info")

    env_p = sub.add_parser("env")
    env_p.add_argument("--shell-export", action="store_true")

    sub.add_parser("docker-env")

    exec_p = sub.add_parser(
        "exec",
        usage="kube-env exec [--stdin TEXT] (-c SHELL_COMMAND | [--] ARG...)",
        help="run a command with the kubectl/helm/draft environment",
    )
    exec_p.add_argument("--stdin", type=str, default="", help="text written to the command's stdin; must precede the command")
    exec_p.add_argument("-c", dest="shell_command", type=str, default=None, help="run this string through the shell as-is")
    exec_p.add_argument("command", nargs=argparse.REMAINDER, help="program and arguments, quoted one by one")

    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)

    if args.workspace:
        workspace = os.path.abspath(args.workspace)
        if not os.path.isdir(workspace):
            print("Invalid workspace", file=sys.stderr)
            raise SystemExit(2)
        settings = replace(settings, workspace_root=workspace)

    shell = Shell(settings)

    if args.cmd == "info":
        raise SystemExit(_cmd_info(shell))
    if args.cmd == "env":
        raise SystemExit(_cmd_env(shell, args.shell_export))
    if args.cmd == "docker-env":
        raise SystemExit(_cmd_docker_env(shell))
    if args.cmd == "exec":
        argv_cmd = args.command[1:] if args.command[:1] == ["--"] else args.command
        if args.shell_command is not None and argv_cmd:
            print("exec takes either -c or a command, not both", file=sys.stderr)
            raise SystemExit(2)
        command = args.shell_command if args.shell_command is not None else shlex.join(argv_cmd)
        if not command:
            print("exec requires a command", file=sys.stderr)
            raise SystemExit(2)
        raise SystemExit(_cmd_exec(shell, command, args.stdin))

    raise SystemExit(2)
