"""
Purpose: Materialize embedded payloads on disk once per process and remove them on exit.
Key Exports: ResourceManager, ProcessCache, find_user_config, CONFIG_FLAG.
Role: Supplies the formatter dispatch path with an executable path and config arguments.
Invariants: At most one extracted file per payload kind per process; cached paths are re-checked on disk.
Invariants: A user biome.json / biome.jsonc suppresses extraction of the default config.
Invariants: Cleanup is registered once, never raises, and exits with 128+signum on SIGINT/SIGTERM.
Invariants: A partially written file is removed before any error or interrupt propagates.
Notes: Destination names are salted with the process id so concurrent runs never share files.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import signal
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ExtractionError
from .payloads import EmbeddedPayload

logger = logging.getLogger(__name__)

CONFIG_FLAG = "--config-path"
USER_CONFIG_NAMES = ("biome.json", "biome.jsonc")
CLEANUP_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGINT", None), getattr(signal, "SIGTERM", None)) if sig is not None
)
# Never follow or reuse a file planted at the predictable destination.
CREATE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_NOFOLLOW", 0) | getattr(os, "O_BINARY", 0)


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except OSError:
        pass


@dataclass
class ProcessCache:
    binary_path: Optional[Path] = None
    config_path: Optional[Path] = None
    cleanup_registered: bool = False

    def paths(self) -> list[Path]:
        return [path for path in (self.binary_path, self.config_path) if path is not None]


def find_user_config(start: Path) -> Optional[Path]:
    """Return the nearest biome config at or above ``start``.

    ``biome.json`` wins over ``biome.jsonc`` in the same directory. The walk
    stops once a directory is its own parent.
    """
    directory = Path(start).resolve()
    while directory != directory.parent:
        for name in USER_CONFIG_NAMES:
            candidate = directory / name
            if candidate.exists():
                return candidate
        directory = directory.parent
    return None


class ResourceManager:
    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        pid: Optional[int] = None,
        cache: Optional[ProcessCache] = None,
        install_handlers: bool = True,
    ) -> None:
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.pid = os.getpid() if pid is None else pid
        self.cache = cache if cache is not None else ProcessCache()
        self.install_handlers = install_handlers

    def binary_destination(self) -> Path:
        suffix = ".exe" if os.name == "nt" else ""
        return self.temp_dir / f"biome-{self.pid}{suffix}"

    def config_destination(self) -> Path:
        return self.temp_dir / f"biome-config-{self.pid}.json"

    def executable_path(self, payload: EmbeddedPayload) -> Path:
        cached = self.cache.binary_path
        if cached is not None and cached.exists():
            logger.debug("reusing extracted %s at %s", payload.name, cached)
            return cached

        dest = self.binary_destination()
        self._extract(payload, dest, executable=True)
        self.cache.binary_path = dest
        self._ensure_cleanup_registered()
        return dest

    def config_path(self, payload: EmbeddedPayload) -> Path:
        cached = self.cache.config_path
        if cached is not None and cached.exists():
            logger.debug("reusing extracted %s at %s", payload.name, cached)
            return cached

        dest = self.config_destination()
        self._extract(payload, dest, executable=False)
        self.cache.config_path = dest
        self._ensure_cleanup_registered()
        return dest

    def resolve_config(self, payload: EmbeddedPayload, cwd: Path) -> list[str]:
        user_config = find_user_config(cwd)
        if user_config is not None:
            logger.debug("using user config %s", user_config)
            return []
        return [CONFIG_FLAG, str(self.config_path(payload))]

    def cleanup(self) -> None:
        for path in self.cache.paths():
            try:
                path.unlink()
            except OSError:
                continue
            logger.debug("removed %s", path)

    def _extract(self, payload: EmbeddedPayload, dest: Path, executable: bool) -> None:
        with payload.open() as src:
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                _unlink_quietly(dest)
                fd = os.open(dest, CREATE_FLAGS, 0o600)
            except OSError as exc:
                raise ExtractionError(f"failed to extract {payload.name} to {dest}: {exc}", str(dest)) from exc
            try:
                with os.fdopen(fd, "wb") as out:
                    shutil.copyfileobj(src, out)
                dest.chmod(0o755 if executable else 0o644)
            except BaseException as exc:
                _unlink_quietly(dest)
                if isinstance(exc, OSError):
                    raise ExtractionError(f"failed to extract {payload.name} to {dest}: {exc}", str(dest)) from exc
                raise
        logger.debug("extracted %s to %s", payload.name, dest)

    def _ensure_cleanup_registered(self) -> None:
        if self.cache.cleanup_registered:
            return
        self.cache.cleanup_registered = True
        atexit.register(self.cleanup)
        if not self.install_handlers:
            return
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread; signal cleanup handlers skipped")
            return
        for sig in CLEANUP_SIGNALS:
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum: int, frame: object) -> None:
        self.cleanup()
        raise SystemExit(128 + signum)
