"""Per-run workspace handling: preparing, locking and cleaning artifacts."""

import contextlib
import shutil
import threading
from collections.abc import Iterator
from pathlib import Path

from apkdisguise.models.pipeline import WorkspaceArtifacts
from apkdisguise.utils.logging import get_logger

logger = get_logger(__name__)

_locks_guard = threading.Lock()
# key -> (lock, number of runs holding or waiting on it)
_path_locks: dict[Path, tuple[threading.Lock, int]] = {}


def _checkout(key: Path) -> threading.Lock:
    with _locks_guard:
        lock, users = _path_locks.get(key, (threading.Lock(), 0))
        _path_locks[key] = (lock, users + 1)
    return lock


def _checkin(key: Path) -> None:
    with _locks_guard:
        lock, users = _path_locks[key]
        if users == 1:
            del _path_locks[key]
        else:
            _path_locks[key] = (lock, users - 1)


def lock_keys(artifacts: WorkspaceArtifacts) -> list[Path]:
    """Locations a run writes to: its working directory and its output group.

    Sources with the same file name share a working directory even when they
    live in different folders, so the source path alone is not enough.
    """
    output_group = artifacts.final_apk.parent / artifacts.work_dir.name
    return sorted({artifacts.work_dir.resolve(), output_group.resolve()})


@contextlib.contextmanager
def workspace_lock(artifacts: WorkspaceArtifacts) -> Iterator[None]:
    """Serialize pipeline runs whose artifacts overlap.

    Locks are taken in sorted order so overlapping runs cannot deadlock.
    """
    with contextlib.ExitStack() as stack:
        for key in lock_keys(artifacts):
            lock = _checkout(key)
            stack.callback(_checkin, key)
            stack.enter_context(lock)
        yield


def reset_work_dir(artifacts: WorkspaceArtifacts) -> None:
    """Remove any working directory left behind by an earlier run."""
    shutil.rmtree(artifacts.work_dir, ignore_errors=True)


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree, logging instead of raising on failure.

    Returns:
        True if the path is gone afterwards.
    """
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove intermediate artifact", path=str(path), error=str(e))
        return False
    return True


def discard_intermediates(artifacts: WorkspaceArtifacts) -> list[Path]:
    """Best-effort removal of the working directory and pre-final APKs.

    Returns:
        Paths that could not be removed.
    """
    return [path for path in artifacts.intermediates if not remove_path(path)]
