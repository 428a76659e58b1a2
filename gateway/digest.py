"""Computes content digests of stored files."""

from pathlib import Path
from typing import Tuple

from common.checksum import IncrementalDigest
from common.constants import DIGEST_READ_SIZE, DIGEST_TYPE_MD5, SUPPORTED_DIGEST_TYPES


class DigestComputer:
    """
    Computes whole-file digests without buffering the file in memory.

    The value equals a one-shot hash of the full content.
    """

    def __init__(self, digest_type: str = DIGEST_TYPE_MD5, read_size: int = DIGEST_READ_SIZE):
        if digest_type not in SUPPORTED_DIGEST_TYPES:
            raise ValueError(f"Unsupported digest type: {digest_type}")
        self.digest_type = digest_type
        self.read_size = read_size

    def digest(self, path: Path) -> Tuple[str, str]:
        """
        Hash the file at path.

        Args:
            path: File to hash

        Returns:
            Tuple of (lowercase hex digest, digest type label)

        Raises:
            OSError: If the file cannot be read
        """
        calculator = IncrementalDigest(self.digest_type)
        with open(path, 'rb') as f:
            while True:
                piece = f.read(self.read_size)
                if not piece:
                    break
                calculator.update(piece)
        return calculator.finalize(), self.digest_type
