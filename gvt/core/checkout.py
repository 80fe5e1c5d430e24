"""Checkout / restore for gvt.

Reconciles the working directory with a stored version: the files of the
current version are taken out, the files of the target version are copied
in, and the pointer is moved. Nothing outside the two trees is touched.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path, PurePosixPath

from ..utils.env import log_debug
from .snapshot_store import SnapshotStore
from .types import CheckoutSummary, TreeEntry


DirLister = Callable[[Path], Iterable[tuple[str, bool]]]


def list_dir(path: Path) -> list[tuple[str, bool]]:
    """(name, is_dir) for each child of `path`."""
    with os.scandir(path) as it:
        return [(e.name, e.is_dir(follow_symlinks=False)) for e in it]


def walk_tree(root: Path, list_dir: DirLister = list_dir) -> Iterator[TreeEntry]:
    """Yield every entry below `root`, parents before children, sorted by name.

    `list_dir` is the only thing that touches the filesystem, so callers may
    pass their own lister to walk an in-memory tree.
    """
    yield from _walk(Path(root), PurePosixPath(), list_dir)


def _walk(directory: Path, rel: PurePosixPath, list_dir: DirLister) -> Iterator[TreeEntry]:
    for name, is_dir in sorted(list_dir(directory), key=lambda item: item[0]):
        yield TreeEntry(path=rel / name, is_dir=is_dir)
        if is_dir:
            yield from _walk(directory / name, rel / name, list_dir)


class CheckoutEngine:
    """Restores stored versions into the working directory."""

    def __init__(self, store: SnapshotStore, list_dir: DirLister = list_dir):
        self.store = store
        self.project_root = store.project_root
        self._list_dir = list_dir

    def checkout(self, version: int | str) -> CheckoutSummary:
        """Make the working directory reflect `version`.

        Raises:
            RepositoryError: INVALID_VERSION if the version does not exist.
        """
        target = self.store.parse_version(version)
        current = self.store.current_version()
        summary = CheckoutSummary(version=target)

        if target != current:
            summary.removed = self.remove_tree(self.store.version_dir(current))
            summary.restored = self.restore_tree(self.store.version_dir(target))

        self.store.set_current_version(target)
        log_debug(
            f"Checked out version {target} (from {current}): "
            f"removed {len(summary.removed)}, restored {len(summary.restored)}"
        )
        return summary

    def remove_tree(self, tree: Path) -> list[str]:
        """Remove the files stored in `tree` from the working directory.

        Directories are only removed once nothing else is left inside them.
        """
        if not tree.is_dir():
            return []

        removed: list[str] = []
        entries = [e for e in walk_tree(tree, self._list_dir) if not self._is_control(e)]
        for entry in sorted(entries, key=lambda e: len(e.path.parts), reverse=True):
            dest = self.project_root.joinpath(*entry.path.parts)
            if entry.is_dir:
                if dest.is_dir() and not dest.is_symlink() and not any(dest.iterdir()):
                    dest.rmdir()
                    removed.append(entry.path.as_posix())
            elif dest.is_file() or dest.is_symlink():
                dest.unlink()
                removed.append(entry.path.as_posix())
        return removed

    def restore_tree(self, tree: Path) -> list[str]:
        """Copy every entry of `tree` into the working directory."""
        copy = shutil.copy2 if self.store.config.copy.preserve_metadata else shutil.copyfile
        restored: list[str] = []
        for entry in walk_tree(tree, self._list_dir):
            if self._is_control(entry):
                continue
            source = tree.joinpath(*entry.path.parts)
            dest = self.project_root.joinpath(*entry.path.parts)
            if entry.is_dir:
                dest.mkdir(parents=True, exist_ok=True)
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            if dest.is_symlink():
                dest.unlink()
            elif dest.is_dir():
                raise IsADirectoryError(f"Cannot restore file over directory: {dest}")
            copy(source, dest)
            restored.append(entry.path.as_posix())
        return restored

    def _is_control(self, entry: TreeEntry) -> bool:
        return entry.top_level == self.store.config.control_dir
