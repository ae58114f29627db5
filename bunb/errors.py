"""
Purpose: Define the error kinds raised by the dispatcher and their exit codes.
Key Exports: ErrorKind, BunbError, RoutingUnreachableError, ExtractionError, PayloadNotFoundError.
Role: Single place where internal failures map to process exit statuses.
Invariants: Every BunbError carries a kind and a non-zero exit code.
Invariants: Exit codes stay outside the range a normal child propagation is expected to use.
"""

from __future__ import annotations

from enum import IntEnum

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
EXIT_NO_INPUT = 66
EXIT_IO_ERROR = 74


class ErrorKind(IntEnum):
    ROUTING_UNREACHABLE = 1
    EXTRACTION = 2
    PAYLOAD_MISSING = 3


class BunbError(RuntimeError):
    exit_code = 1

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        path: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path
        if exit_code is not None:
            self.exit_code = exit_code


class RoutingUnreachableError(BunbError):
    exit_code = EXIT_NOT_FOUND

    def __init__(self, message: str, path: str | None = None, exit_code: int | None = None) -> None:
        super().__init__(ErrorKind.ROUTING_UNREACHABLE, message, path, exit_code)


class ExtractionError(BunbError):
    exit_code = EXIT_IO_ERROR

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(ErrorKind.EXTRACTION, message, path)


class PayloadNotFoundError(BunbError):
    exit_code = EXIT_NO_INPUT

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(ErrorKind.PAYLOAD_MISSING, message, path)


__all__ = [
    "BunbError",
    "ErrorKind",
    "ExtractionError",
    "PayloadNotFoundError",
    "RoutingUnreachableError",
]
