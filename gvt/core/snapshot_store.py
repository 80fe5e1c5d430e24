"""Snapshot storage for gvt.

Every version is a directory under `<control>/versions/<N>` holding full
copies of the files tracked at that version. A new version is derived by
copying the whole base tree, applying one change to the copy, and only then
moving the current-version pointer.
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..config.types import GvtConfig
from ..utils.env import log_debug
from ..utils.fs import atomic_write, is_regular_file
from .history_log import HistoryLog, coerce_version
from .types import ErrorKind, LogEntry, RepositoryError


STAGING_PREFIX = ".staging-"

# Base names that refer to a tree itself or its parent, never to a stored file
RESERVED_NAMES = ("", ".", "..")

Mutation = Callable[[Path], None]


class SnapshotStore:
    """Manages version directories, the current pointer and history."""

    VERSIONS_DIR = "versions"
    CURRENT_FILE = "current"
    HISTORY_FILE = "history.log"

    def __init__(self, project_root: Path, config: GvtConfig | None = None):
        """Initialize snapshot store.

        Args:
            project_root: Working directory being tracked
            config: gvt configuration (control dir name, messages, copy mode)
        """
        self.project_root = Path(project_root)
        self.config = config or GvtConfig()
        self.control_dir = self.project_root / self.config.control_dir
        self.versions_dir = self.control_dir / self.VERSIONS_DIR
        self.current_file = self.control_dir / self.CURRENT_FILE
        self.history = HistoryLog(self.control_dir / self.HISTORY_FILE)

    # ========== State ==========

    def is_initialized(self) -> bool:
        return self.control_dir.is_dir()

    def initialize(self) -> LogEntry:
        """Create version 0 and its history entry.

        Raises:
            RepositoryError: ALREADY_INITIALIZED if the control dir exists.
        """
        if self.is_initialized():
            raise RepositoryError(ErrorKind.ALREADY_INITIALIZED, "Current directory is already initialized.")

        line = self.history.encode_entry(0, self.config.init_message)
        self.version_dir(0).mkdir(parents=True)
        self.set_current_version(0)
        log_debug(f"Initialized repository at {self.control_dir}")
        return self.history.append(0, self.config.init_message, line)

    def current_version(self) -> int:
        """Read the current-version pointer."""
        text = self.current_file.read_text(encoding="utf-8").strip()
        version = coerce_version(text)
        if version is None:
            raise RepositoryError(ErrorKind.IO_FAILURE, f"Corrupted current version pointer: {text!r}")
        return version

    def set_current_version(self, version: int) -> None:
        atomic_write(self.current_file, str(version), mode="w")

    def versions(self) -> list[int]:
        """All stored version numbers, ascending."""
        if not self.versions_dir.is_dir():
            return []
        found = []
        for entry in self.versions_dir.iterdir():
            number = coerce_version(entry.name)
            if number is not None and entry.is_dir() and entry.name == str(number):
                found.append(number)
        return sorted(found)

    def latest_version(self) -> int:
        found = self.versions()
        return found[-1] if found else 0

    def version_dir(self, version: int) -> Path:
        return self.versions_dir / str(version)

    def has_version(self, version: int) -> bool:
        return self.version_dir(version).is_dir()

    def parse_version(self, value: int | str | None) -> int:
        """Resolve user input to an existing version number.

        Raises:
            RepositoryError: INVALID_VERSION for non-numeric, negative or
                unknown versions.
        """
        number = coerce_version(value)
        if number is None or not self.has_version(number):
            shown = "" if value is None else value
            raise RepositoryError(ErrorKind.INVALID_VERSION, f"Invalid version number: {shown}")
        return number

    def tracked_files(self, version: int | None = None) -> list[str]:
        """Names stored at the top level of a version tree."""
        if version is None:
            version = self.current_version()
        tree = self.version_dir(version)
        if not tree.is_dir():
            return []
        return sorted(p.name for p in tree.iterdir())

    def is_tracked(self, name: str, version: int | None = None) -> bool:
        if name in RESERVED_NAMES:
            return False
        if version is None:
            version = self.current_version()
        return (self.version_dir(version) / name).exists()

    # ========== Mutations ==========

    def add_file(self, path: str | Path, message: str | None = None) -> LogEntry:
        """Track a new file in a new version.

        Raises:
            RepositoryError: ADD_FILE_NOT_FOUND, ALREADY_TRACKED
        """
        source = self._resolve(path)
        name = source.name
        if not is_regular_file(source):
            raise RepositoryError(ErrorKind.ADD_FILE_NOT_FOUND, f"File not found. File: {name}")
        if self.is_tracked(name):
            raise RepositoryError(ErrorKind.ALREADY_TRACKED, f"File already added. File: {name}")

        return self._derive(
            lambda tree: self._copy_file(source, tree / name),
            message,
            f"File added successfully. File: {name}",
        )

    def detach_file(self, path: str | Path, message: str | None = None) -> LogEntry:
        """Stop tracking a file in a new version.

        Raises:
            RepositoryError: NOT_TRACKED
        """
        name = Path(path).name
        if not self.is_tracked(name):
            raise RepositoryError(ErrorKind.NOT_TRACKED, f"File is not added to gvt. File: {name}")

        return self._derive(
            lambda tree: _remove_path(tree / name),
            message,
            f"File detached successfully. File: {name}",
        )

    def commit_file(self, path: str | Path, message: str | None = None) -> LogEntry:
        """Store the live content of a tracked file in a new version.

        Raises:
            RepositoryError: COMMIT_FILE_NOT_FOUND, NOT_TRACKED
        """
        source = self._resolve(path)
        name = source.name
        if not is_regular_file(source):
            raise RepositoryError(ErrorKind.COMMIT_FILE_NOT_FOUND, f"File not found. File: {name}")
        if not self.is_tracked(name):
            raise RepositoryError(ErrorKind.NOT_TRACKED, f"File is not added to gvt. File: {name}")

        return self._derive(
            lambda tree: self._copy_file(source, tree / name),
            message,
            f"File committed successfully. File: {name}",
        )

    def _derive(self, mutate: Mutation, message: str | None, default_message: str) -> LogEntry:
        """Build the next version from the current one.

        The new tree is assembled in a staging directory and renamed into
        place once complete; the pointer and the log follow the rename.
        """
        base = self.current_version()
        new_version = self.latest_version() + 1
        target = self.version_dir(new_version)
        if target.exists():
            raise RepositoryError(ErrorKind.IO_FAILURE, f"Version directory already exists: {target}")
        text = message.strip() if message is not None else default_message.strip()
        line = self.history.encode_entry(new_version, text)

        staging = Path(tempfile.mkdtemp(prefix=f"{STAGING_PREFIX}{new_version}-", dir=self.versions_dir))
        try:
            tree = staging / "tree"
            shutil.copytree(self.version_dir(base), tree, copy_function=self._copy_function())
            mutate(tree)
            tree.rename(target)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        self.set_current_version(new_version)
        log_debug(f"Derived version {new_version} from {base}")
        return self.history.append(new_version, text, line)

    # ========== Helpers ==========

    def _resolve(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.project_root / candidate
        return candidate

    def _copy_function(self) -> Callable[..., object]:
        return shutil.copy2 if self.config.copy.preserve_metadata else shutil.copyfile

    def _copy_file(self, source: Path, dest: Path) -> None:
        self._copy_function()(source, dest)


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)
