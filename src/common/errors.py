"""Shared error codes and exceptions for the counting core and CLI."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    IO_ERROR = "IO_ERROR"
    DECODE_ERROR = "DECODE_ERROR"


class BackendError(RuntimeError):
    """Exception carrying a structured error code for the CLI."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:  # pragma: no cover - formatting sugar
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class FileAccessError(BackendError):
    """Raised when the target file cannot be opened for reading."""

    def __init__(self, path: Path, os_error: OSError) -> None:
        reason = os_error.strerror or str(os_error)
        super().__init__(
            ErrorCode.IO_ERROR,
            f"cannot open '{path}': {reason}",
            context={"path": str(path), "errno": os_error.errno},
        )
        self.path = path
        self.os_error = os_error


class StreamReadError(BackendError):
    """Raised when reading fails after the file was opened."""

    def __init__(self, path: Path, os_error: OSError, *, bytes_read: int = 0) -> None:
        reason = os_error.strerror or str(os_error)
        super().__init__(
            ErrorCode.IO_ERROR,
            f"read failed for '{path}' after {bytes_read} bytes: {reason}",
            context={"path": str(path), "errno": os_error.errno, "bytes_read": bytes_read},
        )
        self.path = path
        self.os_error = os_error
        self.bytes_read = bytes_read


class DecodeError(BackendError):
    """Raised by fail-fast character counting on malformed UTF-8."""

    def __init__(self, path: Optional[Path], offset: int, reason: str) -> None:
        where = f"'{path}'" if path else "stream"
        super().__init__(
            ErrorCode.DECODE_ERROR,
            f"invalid UTF-8 in {where} near byte {offset}: {reason}",
            context={"path": str(path) if path else None, "offset": offset},
        )
        self.path = path
        self.offset = offset
