"""gvt controller - main orchestrator.

Ties the snapshot store, history log and checkout engine to one working
directory and turns every outcome into an `OperationResult`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config import ConfigLoader, GvtConfig
from ..utils.env import log_debug
from .checkout import CheckoutEngine
from .history_log import HistoryLog
from .snapshot_store import SnapshotStore
from .types import ErrorKind, OperationResult, RepositoryError, VersionInfo


NOT_INITIALIZED_MESSAGE = "Current directory is not initialized. Please use init command to initialize."
IO_FAILURE_MESSAGE = "Underlying system problem. See ERR for details."


@dataclass
class GvtStatus:
    """Status of a gvt working directory."""
    initialized: bool
    project_root: str
    control_dir: str
    current_version: int | None = None
    latest_version: int | None = None
    tracked_files: list[str] = field(default_factory=list)


class GvtController:
    """Main controller for gvt operations."""

    def __init__(self, project_root: Path | str | None = None, config: GvtConfig | None = None):
        """Initialize controller.

        Args:
            project_root: Working directory (defaults to cwd)
            config: Explicit configuration; loaded from disk when omitted
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._config_loader = ConfigLoader(project_root=self.project_root)
        self._config = config
        self._store: SnapshotStore | None = None
        self._engine: CheckoutEngine | None = None

    @property
    def config(self) -> GvtConfig:
        """Get current configuration."""
        if self._config is None:
            self._config = self._config_loader.config
        return self._config

    @property
    def store(self) -> SnapshotStore:
        """Get snapshot store (lazy init)."""
        if self._store is None:
            self._store = SnapshotStore(self.project_root, self.config)
        return self._store

    @property
    def history_log(self) -> HistoryLog:
        return self.store.history

    @property
    def engine(self) -> CheckoutEngine:
        """Get checkout engine (lazy init)."""
        if self._engine is None:
            self._engine = CheckoutEngine(self.store)
        return self._engine

    def is_initialized(self) -> bool:
        return self.store.is_initialized()

    # ========== Operations ==========

    def init(self) -> OperationResult:
        """Initialize gvt in the working directory."""
        def run() -> OperationResult:
            self.store.initialize()
            return OperationResult.ok("Current directory initialized successfully.", version=0)

        return self._execute(run, require_init=False)

    def add(self, path: str, message: str | None = None) -> OperationResult:
        """Start tracking `path` in a new version."""
        def run() -> OperationResult:
            entry = self.store.add_file(path, message)
            return OperationResult.ok(f"File added successfully. File: {Path(path).name}", version=entry.version)

        return self._execute(run)

    def detach(self, path: str, message: str | None = None) -> OperationResult:
        """Stop tracking `path` in a new version."""
        def run() -> OperationResult:
            entry = self.store.detach_file(path, message)
            return OperationResult.ok(f"File detached successfully. File: {Path(path).name}", version=entry.version)

        return self._execute(run)

    def commit(self, path: str, message: str | None = None) -> OperationResult:
        """Record the current content of `path` in a new version."""
        def run() -> OperationResult:
            entry = self.store.commit_file(path, message)
            return OperationResult.ok(f"File committed successfully. File: {Path(path).name}", version=entry.version)

        return self._execute(run)

    def checkout(self, version: int | str | None) -> OperationResult:
        """Restore `version` into the working directory."""
        def run() -> OperationResult:
            summary = self.engine.checkout(version)
            return OperationResult.ok(f"Checkout successful for version: {summary.version}", version=summary.version)

        return self._execute(run)

    def version_info(self, version: int | str | None = None) -> OperationResult:
        """Describe one version (the current one by default)."""
        def run() -> OperationResult:
            info = self.get_version_info(version)
            return OperationResult.ok(info.describe(), version=info.version)

        return self._execute(run)

    def history(self, limit: int | None = None) -> OperationResult:
        """List recent versions, newest first."""
        def run() -> OperationResult:
            effective = limit if limit is not None and limit > 0 else self.config.history.default_limit
            return OperationResult.ok(self.history_log.format_recent(effective))

        return self._execute(run)

    def status(self) -> OperationResult:
        """Summarize the repository state and any consistency issues."""
        def run() -> OperationResult:
            status = self.get_status()
            lines = [
                f"Current version: {status.current_version}",
                f"Latest version: {status.latest_version}",
                "Tracked files: " + (", ".join(status.tracked_files) if status.tracked_files else "(none)"),
            ]
            validation = self.validate_system()
            for issue in validation["issues"]:
                lines.append(f"Issue: {issue}")
            return OperationResult.ok("\n".join(lines), version=status.current_version)

        return self._execute(run)

    # ========== Queries ==========

    def get_version_info(self, version: int | str | None = None) -> VersionInfo:
        """Version number plus full message.

        Raises:
            RepositoryError: INVALID_VERSION
        """
        number = self.store.current_version() if version is None else self.store.parse_version(version)
        entry = self.history_log.entry_for(number)
        return VersionInfo(version=number, message=entry.message)

    def get_status(self) -> GvtStatus:
        """Get repository status.

        Returns:
            GvtStatus with current state
        """
        status = GvtStatus(
            initialized=self.is_initialized(),
            project_root=str(self.project_root),
            control_dir=str(self.store.control_dir),
        )
        if not status.initialized:
            return status

        status.current_version = self.store.current_version()
        status.latest_version = self.store.latest_version()
        status.tracked_files = self.store.tracked_files(status.current_version)
        return status

    def validate_system(self) -> dict[str, Any]:
        """Check that pointer, version trees and history agree.

        Returns:
            Validation result with any issues found
        """
        issues: list[str] = []

        if not self.is_initialized():
            issues.append("gvt not initialized (run 'gvt init')")
            return {"valid": False, "issues": issues}

        versions = self.store.versions()
        if not versions or versions[0] != 0:
            issues.append("Version 0 is missing")
        elif versions != list(range(len(versions))):
            issues.append("Version numbers are not contiguous")

        try:
            current = self.store.current_version()
        except (OSError, RepositoryError) as e:
            issues.append(f"Current version pointer unreadable: {e}")
        else:
            if current not in versions:
                issues.append(f"Current version {current} has no stored tree")

        logged = [entry.version for entry in self.history_log.entries()]
        if logged != sorted(set(logged)):
            issues.append("History entries are duplicated or out of order")
        missing = sorted(set(versions) - set(logged))
        if missing:
            issues.append("Versions without history entry: " + ", ".join(map(str, missing)))
        orphaned = sorted(set(logged) - set(versions))
        if orphaned:
            issues.append("History entries without stored tree: " + ", ".join(map(str, orphaned)))

        return {
            "valid": len(issues) == 0,
            "issues": issues,
        }

    # ========== Internals ==========

    def _execute(self, run: Callable[[], OperationResult], require_init: bool = True) -> OperationResult:
        if require_init and not self.is_initialized():
            return OperationResult.fail(ErrorKind.NOT_INITIALIZED, NOT_INITIALIZED_MESSAGE)

        try:
            return run()
        except RepositoryError as e:
            log_debug(f"{e.kind.value}: {e.message}")
            if e.kind is ErrorKind.IO_FAILURE:
                return OperationResult.fail(e.kind, IO_FAILURE_MESSAGE, detail=e.message)
            return OperationResult.fail(e.kind, e.message)
        except OSError as e:
            log_debug(f"I/O failure: {e}")
            return OperationResult.fail(ErrorKind.IO_FAILURE, IO_FAILURE_MESSAGE, detail=str(e))
        except UnicodeError as e:
            log_debug(f"Encoding failure: {e}")
            return OperationResult.fail(ErrorKind.IO_FAILURE, IO_FAILURE_MESSAGE, detail=str(e))
