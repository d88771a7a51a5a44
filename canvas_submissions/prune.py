"""
Reconciler

Removes everything under the course root that the current remote listing no
longer accounts for. Files go first, then directories, children before their
parents. Directories are removed with rmdir only: a directory that is still
non-empty at that point means the live set was computed wrong, and the run
stops instead of deleting recursively.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set, Tuple

from .exceptions import FileOperationError

logger = logging.getLogger("canvas_submissions.prune")


@dataclass
class LiveSet:
    """Paths that should exist locally after the sync."""
    dirs: Set[Path] = field(default_factory=set)
    files: Set[Path] = field(default_factory=set)

    def add_file(self, path: Path, *dirs: Path) -> None:
        """Register a file, its directory, and any enclosing directories given."""
        self.files.add(path)
        self.dirs.add(path.parent)
        self.dirs.update(dirs)


@dataclass
class PruneResult:
    files: List[Path] = field(default_factory=list)
    dirs: List[Path] = field(default_factory=list)
    dry_run: bool = False


def _raise_walk_error(error: OSError) -> None:
    raise FileOperationError("walk directory", error.filename, error)


def find_stale(course_root: Path, live: LiveSet) -> Tuple[List[Path], List[Path]]:
    """
    Collect files and directories under course_root that are not live.

    The course root itself is always current. Directories come back in
    post-order, so every directory is listed after all of its descendants.

    Returns:
        Tuple of (stale_files, stale_dirs)

    Raises:
        FileOperationError: If part of the tree cannot be read
    """
    if not course_root.is_dir():
        logger.debug(f"{course_root} does not exist, nothing to prune")
        return [], []

    stale_files = []
    stale_dirs = []
    for dirpath, dirnames, filenames in os.walk(course_root, topdown=False, onerror=_raise_walk_error):
        current = Path(dirpath)
        for name in sorted(filenames):
            path = current / name
            if path not in live.files:
                stale_files.append(path)
        # Directory symlinks show up in dirnames but are not walked into
        for name in sorted(dirnames):
            path = current / name
            if path.is_symlink() and path not in live.files:
                stale_files.append(path)
        if current != course_root and current not in live.dirs:
            stale_dirs.append(current)

    return stale_files, stale_dirs


def prune(course_root: Path, live: LiveSet, dry_run: bool = False) -> PruneResult:
    """
    Delete stale files, then stale directories.

    Args:
        course_root: Local directory of the course
        live: Paths registered by the planner
        dry_run: Only report what would be deleted

    Returns:
        PruneResult listing what was (or would be) deleted

    Raises:
        FileOperationError: If a deletion fails, including a directory that
            is not empty when its turn comes
    """
    stale_files, stale_dirs = find_stale(course_root, live)
    result = PruneResult(files=stale_files, dirs=stale_dirs, dry_run=dry_run)

    for path in stale_files:
        if dry_run:
            logger.info(f"need to delete file {path}")
            continue
        logger.info(f"deleting file {path}")
        try:
            path.unlink()
        except OSError as e:
            raise FileOperationError("delete file", str(path), e)

    for path in stale_dirs:
        if dry_run:
            logger.info(f"need to delete directory {path}")
            continue
        logger.info(f"deleting dir {path}")
        try:
            path.rmdir()
        except OSError as e:
            raise FileOperationError("delete directory", str(path), e)

    return result
