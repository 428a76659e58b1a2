"""Builds FileRecord snapshots from filesystem stat information."""

import math
import os
import stat
import time
from pathlib import Path
from typing import Optional

from gateway.exceptions import NotFoundError
from gateway.types import AccessPolicy, FileRecord


def to_int_seconds(timestamp: float) -> int:
    """
    Truncate a float timestamp to whole seconds.
    """
    return int(math.floor(timestamp))


def stat_regular_file(path: Path) -> Optional[os.stat_result]:
    """
    Stat a path, following symlinks.

    Returns:
        stat result, or None when the path is missing or not a regular file
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st


class MetadataProvider:
    """Derives FileRecords from a single stat call."""

    def __init__(self, policy: AccessPolicy):
        self.policy = policy

    def exists(self, path: Path) -> bool:
        return stat_regular_file(path) is not None

    def describe(self, path: Path, file_id: str, name: Optional[str] = None) -> FileRecord:
        """
        Describe the regular file at path.

        Args:
            path: Resolved path under the storage root
            file_id: Identifier echoed back in the record
            name: Display name; defaults to the resolved filename

        Returns:
            FileRecord snapshot

        Raises:
            NotFoundError: If path is missing or not a regular file
        """
        st = stat_regular_file(path)
        if st is None:
            raise NotFoundError(f"File not found: {file_id}")

        now = time.time()
        # st_birthtime is only exposed on some platforms and filesystems.
        birth_time = getattr(st, "st_birthtime", None) or now

        return FileRecord(
            id=file_id,
            name=name or path.name,
            size=st.st_size,
            create_time=to_int_seconds(birth_time),
            modify_time=to_int_seconds(st.st_mtime or now),
            creator_id=self.policy.principal_id,
            modifier_id=self.policy.principal_id,
        )
