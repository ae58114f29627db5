"""
Purpose: Load dispatcher configuration from the process environment.
Key Exports: Settings, RUNTIME_MODE_ENV.
Role: Keep every environment variable name the dispatcher reads in one module.
Invariants: Empty variables are treated as unset.
Notes: BUN_BE_BUN is the only signal separating runtime mode from dispatcher mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

RUNTIME_MODE_ENV = "BUN_BE_BUN"
RUNTIME_ENV = "BUNB_RUNTIME"
BIOME_BINARY_ENV = "BUNB_BIOME_BINARY"
BIOME_CONFIG_ENV = "BUNB_BIOME_CONFIG"
TMPDIR_ENV = "BUNB_TMPDIR"
LOG_LEVEL_ENV = "BUNB_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def _path_or_none(value: Optional[str]) -> Optional[Path]:
    return Path(value).expanduser() if value else None


@dataclass(frozen=True)
class Settings:
    runtime: Optional[str] = None
    biome_binary: Optional[Path] = None
    biome_config: Optional[Path] = None
    temp_dir: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL
    runtime_mode: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            runtime=env.get(RUNTIME_ENV) or None,
            biome_binary=_path_or_none(env.get(BIOME_BINARY_ENV)),
            biome_config=_path_or_none(env.get(BIOME_CONFIG_ENV)),
            temp_dir=_path_or_none(env.get(TMPDIR_ENV)),
            log_level=(env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
            runtime_mode=bool(env.get(RUNTIME_MODE_ENV)),
        )
