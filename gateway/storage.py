"""Writes uploaded payloads into the storage root."""

import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from common.constants import STAGING_DIR_NAME
from gateway.exceptions import StoreFailureError

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".part"
STORED_FILE_MODE = 0o644


def ensure_directory(root: Union[str, Path]) -> Path:
    """Ensure the storage root exists."""
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    return root


def write_atomic(path: Path, data: bytes, staging_dir: Optional[Path] = None) -> int:
    """
    Write data to path through a temporary file and an atomic rename.

    Readers see either the previous content or the complete new content.

    Args:
        path: Destination file
        data: Raw payload
        staging_dir: Directory for the temporary file; must be on the same
            filesystem as path (defaults to path's directory)

    Returns:
        Number of bytes written

    Raises:
        OSError: If any step of the write fails; the temporary file is removed
    """
    temp_dir = staging_dir if staging_dir is not None else path.parent
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=TEMP_SUFFIX, dir=temp_dir)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_name, STORED_FILE_MODE)
        os.replace(temp_name, path)
    except BaseException:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise
    return len(data)


class _FileLock:
    """A lock plus the number of writers holding or waiting for it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class StorageWriter:
    """
    Serialises writes per filename and performs them atomically.

    Temporary files live in a hidden staging directory under the root, so
    in-flight writes never appear as stored files. Per-filename locks exist
    only while some writer holds or waits for them.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.staging = self.root / STAGING_DIR_NAME
        self._locks: Dict[str, _FileLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def _locked(self, filename: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(filename)
            if entry is None:
                entry = self._locks[filename] = _FileLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[filename]

    def write(self, path: Path, data: bytes) -> int:
        """
        Replace the content of path with data.

        Raises:
            StoreFailureError: If the write fails with an I/O error
        """
        with self._locked(path.name):
            try:
                ensure_directory(self.staging)
                written = write_atomic(path, data, self.staging)
            except OSError as e:
                logger.error(f"Failed to write {path.name}: {e}")
                raise StoreFailureError(f"Failed to store {path.name}: {e.strerror or e}") from e

        logger.info(f"Stored {written} bytes to {path.name}")
        return written

    def purge_staging(self) -> int:
        """
        Remove temporary files left behind by interrupted writes.

        Must only run while no writes are in flight, i.e. at startup.

        Returns:
            Number of files removed
        """
        if not self.staging.is_dir():
            return 0

        removed = 0
        for leftover in self.staging.iterdir():
            if leftover.is_file() and leftover.name.endswith(TEMP_SUFFIX):
                leftover.unlink()
                removed += 1

        if removed:
            logger.warning(f"Removed {removed} interrupted upload(s) from {self.staging}")
        return removed
