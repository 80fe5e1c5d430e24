"""Type definitions shared by the gvt core.

Outcomes cross the core boundary as `OperationResult`; failures carry an
`ErrorKind` so callers never have to look at message text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath


class ErrorKind(str, Enum):
    """Every anticipated way a gvt operation can fail."""
    # Usage errors
    MISSING_COMMAND = "missing_command"
    UNKNOWN_COMMAND = "unknown_command"
    MISSING_ADD_ARG = "missing_add_arg"
    MISSING_DETACH_ARG = "missing_detach_arg"
    MISSING_COMMIT_ARG = "missing_commit_arg"
    # State errors
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    ADD_FILE_NOT_FOUND = "add_file_not_found"
    COMMIT_FILE_NOT_FOUND = "commit_file_not_found"
    ALREADY_TRACKED = "already_tracked"
    NOT_TRACKED = "not_tracked"
    INVALID_VERSION = "invalid_version"
    # I/O errors
    IO_FAILURE = "io_failure"

    @property
    def code(self) -> int:
        """Process exit status reported for this kind."""
        return EXIT_CODES[self]


EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.MISSING_COMMAND: 1,
    ErrorKind.UNKNOWN_COMMAND: 1,
    ErrorKind.MISSING_ADD_ARG: 20,
    ErrorKind.MISSING_DETACH_ARG: 30,
    ErrorKind.MISSING_COMMIT_ARG: 50,
    ErrorKind.NOT_INITIALIZED: -2,
    ErrorKind.ALREADY_INITIALIZED: 10,
    ErrorKind.ADD_FILE_NOT_FOUND: 21,
    ErrorKind.COMMIT_FILE_NOT_FOUND: 51,
    # Re-adding or detaching an unknown file is reported, not treated as fatal
    ErrorKind.ALREADY_TRACKED: 0,
    ErrorKind.NOT_TRACKED: 0,
    ErrorKind.INVALID_VERSION: 60,
    ErrorKind.IO_FAILURE: -3,
}


class RepositoryError(Exception):
    """Raised by the store, log and checkout engine for state errors."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class Failure:
    """A typed failure: what went wrong plus the text shown to the user."""
    kind: ErrorKind
    message: str

    @property
    def code(self) -> int:
        return self.kind.code


@dataclass
class OperationResult:
    """Result of a gvt operation."""
    success: bool
    message: str = ""
    version: int | None = None
    error: Failure | None = None
    detail: str | None = None

    @classmethod
    def ok(cls, message: str, version: int | None = None) -> OperationResult:
        return cls(success=True, message=message, version=version)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, detail: str | None = None) -> OperationResult:
        return cls(success=False, message=message, error=Failure(kind, message), detail=detail)

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None

    @property
    def exit_code(self) -> int:
        return self.error.code if self.error else 0


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One line of the history log."""
    version: int
    message: str

    @property
    def summary(self) -> str:
        """First physical line of the message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Version number and its full log message."""
    version: int
    message: str

    def describe(self) -> str:
        return f"Version: {self.version}\n{self.message}"


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A path inside a snapshot tree, relative to the tree root."""
    path: PurePosixPath
    is_dir: bool

    @property
    def top_level(self) -> str:
        return self.path.parts[0]


@dataclass
class CheckoutSummary:
    """What a checkout changed in the working directory."""
    version: int
    removed: list[str] = field(default_factory=list)
    restored: list[str] = field(default_factory=list)
