"""
Purpose: Reference the formatter binary and default config bundled with the package.
Key Exports: EmbeddedPayload, bundled_biome(), bundled_config(), BIOME_BINARY_NAME.
Role: Byte sources consumed by the resource manager; never fetched at runtime.
Invariants: Payloads are read-only; a missing or unreadable payload raises PayloadNotFoundError.
Invariants: BUNB_BIOME_BINARY / BUNB_BIOME_CONFIG remain runtime overrides.
Notes: setup.py stages the binary into bunb/_embedded at wheel build time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import PayloadNotFoundError

BIOME_BINARY_NAME = "biome.exe" if os.name == "nt" else "biome"
BIOME_CONFIG_NAME = "biome.json"


def _embedded_dir() -> Path:
    return Path(__file__).resolve().parent / "_embedded"


@dataclass(frozen=True)
class EmbeddedPayload:
    name: str
    path: Path

    def exists(self) -> bool:
        return self.path.is_file()

    def open(self) -> BinaryIO:
        try:
            return self.path.open("rb")
        except FileNotFoundError:
            raise PayloadNotFoundError(
                f"embedded {self.name} not found at {self.path}; reinstall bunb with bundled assets",
                str(self.path),
            ) from None
        except OSError as exc:
            raise PayloadNotFoundError(
                f"cannot read embedded {self.name} at {self.path}: {exc.strerror or exc}",
                str(self.path),
            ) from exc


def bundled_biome(override: Optional[Path] = None) -> EmbeddedPayload:
    return EmbeddedPayload("biome", override or _embedded_dir() / BIOME_BINARY_NAME)


def bundled_config(override: Optional[Path] = None) -> EmbeddedPayload:
    return EmbeddedPayload("biome config", override or _embedded_dir() / BIOME_CONFIG_NAME)
