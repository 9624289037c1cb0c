"""Command line interface.

Usage:
  contman pull IMAGE
  contman run --image IMAGE [-e KEY=VALUE]... [-v SRC:DST[:ro]]... [--system-mounts] CMD
"""

import argparse
import sys
from typing import Dict, List, Optional, Sequence

import structlog

from ._version import __version__
from .models import ContainerConfig, Mount
from .models.errors import ContmanError
from .services.container import RuntimeManager
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def parse_env(value: str) -> tuple[str, str]:
    """Parse a ``KEY=VALUE`` argument."""
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key, val


def parse_mount(value: str) -> Mount:
    """Parse a ``SRC:DST[:ro|rw]`` argument."""
    parts = value.split(":")
    if len(parts) == 3 and parts[2] in ("ro", "rw"):
        return Mount(source=parts[0], target=parts[1], read_only=parts[2] == "ro")
    if len(parts) == 2 and all(parts):
        return Mount(source=parts[0], target=parts[1])
    raise argparse.ArgumentTypeError(f"expected SRC:DST[:ro|rw], got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contman",
        description="Run shell commands in ephemeral Docker containers",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", required=True)

    pull = subparsers.add_parser("pull", help="Pull an image, printing daemon progress")
    pull.add_argument("image")

    run = subparsers.add_parser("run", help="Run a shell command in a new container")
    run.add_argument("--image", required=True)
    run.add_argument(
        "-e", "--env", action="append", type=parse_env, default=[], metavar="KEY=VALUE"
    )
    run.add_argument(
        "-v", "--mount", action="append", type=parse_mount, default=[], metavar="SRC:DST[:ro]"
    )
    run.add_argument(
        "--system-mounts",
        action="store_true",
        help="Also mount the Docker socket and credential directory",
    )
    run.add_argument("--keep", action="store_true", help="Do not remove the container")
    run.add_argument("cmd", nargs=argparse.REMAINDER, help="Shell command")

    return parser


def cmd_pull(manager: RuntimeManager, args: argparse.Namespace) -> int:
    manager.pull_image(args.image)
    return 0


def cmd_run(manager: RuntimeManager, args: argparse.Namespace) -> int:
    command = " ".join(args.cmd).strip()
    if not command:
        logger.error("No command given")
        return 2

    mounts: List[Mount] = list(args.mount)
    if args.system_mounts:
        mounts.extend(manager.get_system_mounts())
    env: Dict[str, str] = dict(args.env)

    manager.ensure_image(args.image)
    container = manager.container_create(
        ContainerConfig(image=args.image, cmd=command, env=env, mounts=mounts)
    )
    try:
        container.start()
        container.logs(sys.stdout.buffer)
        return container.wait()
    finally:
        if not args.keep:
            container.remove(force=True)


COMMANDS = {
    "pull": cmd_pull,
    "run": cmd_run,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        with RuntimeManager() as manager:
            return COMMANDS[args.command](manager, args)
    except ContmanError as e:
        logger.error(str(e), error_type=e.error_type.value)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
