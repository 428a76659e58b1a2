"""Incremental content digests shared by the gateway and the CLI."""

import hashlib

from common.constants import DIGEST_TYPE_MD5, SUPPORTED_DIGEST_TYPES


class IncrementalDigest:
    """
    Calculate a digest incrementally for streaming data.

    Usage:
        calculator = IncrementalDigest("md5")
        calculator.update(piece1)
        calculator.update(piece2)
        final_digest = calculator.finalize()
    """

    def __init__(self, digest_type: str = DIGEST_TYPE_MD5):
        if digest_type not in SUPPORTED_DIGEST_TYPES:
            raise ValueError(f"Unsupported digest type: {digest_type}")
        self.digest_type = digest_type
        self._hasher = hashlib.new(digest_type)
        self._finalized = False

    def update(self, data: bytes) -> "IncrementalDigest":
        """
        Add data to the digest.

        Raises:
            ValueError: If called after finalize()
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
        return self

    def finalize(self) -> str:
        self._finalized = True
        return self._hasher.hexdigest()
