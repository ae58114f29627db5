"""
Purpose: Expose the `bunb` console script that routes argv to biome or to the bun runtime.
Key Exports: main(), is_biome_command(), run_biome(), run_runtime(), BIOME_COMMANDS.
Role: Single executable surface combining a JavaScript runtime CLI and the biome toolchain.
Invariants: Arguments are forwarded verbatim; only `--config-path <path>` may be appended.
Invariants: Exit code mirrors the invoked process status; internal failures use BunbError codes.
Invariants: Ctrl-C before cleanup handlers exist still exits 130 without a traceback.
Notes: No retries. A spawn failure on either path is fatal for the invocation.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence

from ._logging import setup_logging
from .errors import EXIT_NOT_EXECUTABLE, BunbError, RoutingUnreachableError
from .payloads import EmbeddedPayload, bundled_biome, bundled_config
from .resources import ResourceManager
from .settings import RUNTIME_MODE_ENV, Settings

logger = logging.getLogger(__name__)

BIOME_COMMANDS = ("format", "lint", "check", "ci")


def is_biome_command(args: Sequence[str]) -> bool:
    return bool(args) and args[0] in BIOME_COMMANDS


def _spawn(cmd: list[str], env: Optional[dict[str, str]] = None) -> int:
    try:
        proc = subprocess.Popen(cmd, env=env)
    except PermissionError as exc:
        raise RoutingUnreachableError(
            f"cannot execute {cmd[0]}: {exc.strerror or exc}", cmd[0], EXIT_NOT_EXECUTABLE
        ) from exc
    except OSError as exc:
        raise RoutingUnreachableError(f"cannot execute {cmd[0]}: {exc.strerror or exc}", cmd[0]) from exc
    returncode = proc.wait()
    if returncode < 0:
        return 128 - returncode
    return returncode


def resolve_runtime(settings: Settings) -> str:
    if settings.runtime:
        return settings.runtime
    discovered = shutil.which("bun")
    if not discovered:
        raise RoutingUnreachableError("bun runtime not found; install bun or set BUNB_RUNTIME")
    return discovered


def run_runtime(args: Sequence[str], settings: Settings) -> int:
    runtime = resolve_runtime(settings)
    env = dict(os.environ)
    env[RUNTIME_MODE_ENV] = "1"
    logger.debug("forwarding %r to runtime %s", list(args), runtime)
    return _spawn([runtime, *args], env)


def run_biome(
    args: Sequence[str],
    manager: ResourceManager,
    binary: EmbeddedPayload,
    config: EmbeddedPayload,
    cwd: Optional[Path] = None,
) -> int:
    biome_path = manager.executable_path(binary)
    config_args = manager.resolve_config(config, cwd or Path.cwd())
    logger.debug("forwarding %r to %s", list(args), biome_path)
    return _spawn([str(biome_path), *args, *config_args])


def dispatch(args: Sequence[str], settings: Settings, manager: Optional[ResourceManager] = None) -> int:
    if not settings.runtime_mode and is_biome_command(args):
        if manager is None:
            manager = ResourceManager(temp_dir=settings.temp_dir)
        return run_biome(
            args,
            manager,
            bundled_biome(settings.biome_binary),
            bundled_config(settings.biome_config),
        )
    return run_runtime(args, settings)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    try:
        return dispatch(args, settings)
    except BunbError as exc:
        print(f"bunb: {exc}", file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        return 128 + signal.SIGINT


if __name__ == "__main__":
    raise SystemExit(main())
