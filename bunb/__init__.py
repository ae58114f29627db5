"""
Purpose: Dispatch `bunb` invocations to the bundled biome toolchain or the bun runtime.
Key Exports: ResourceManager, ProcessCache, EmbeddedPayload, Settings, BunbError and subclasses.
Role: Public surface of the dispatcher for the console script and for embedding callers.
Invariants: Importing the package has no side effects on the filesystem or signal handlers.
"""

from __future__ import annotations

from .errors import (
    BunbError,
    ErrorKind,
    ExtractionError,
    PayloadNotFoundError,
    RoutingUnreachableError,
)
from .payloads import EmbeddedPayload, bundled_biome, bundled_config
from .resources import CONFIG_FLAG, ProcessCache, ResourceManager, find_user_config
from .settings import Settings

__version__ = "0.1.0"

__all__ = [
    "BunbError",
    "CONFIG_FLAG",
    "EmbeddedPayload",
    "ErrorKind",
    "ExtractionError",
    "PayloadNotFoundError",
    "ProcessCache",
    "ResourceManager",
    "RoutingUnreachableError",
    "Settings",
    "bundled_biome",
    "bundled_config",
    "find_user_config",
]
