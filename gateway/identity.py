"""Maps caller-supplied file ids to paths directly under the storage root."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from common.constants import STAGING_DIR_NAME

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = "_unnamed"
# The staging directory is reserved for in-flight writes.
_UNSAFE_NAMES = ("", ".", "..", STAGING_DIR_NAME)


def final_segment(value: str) -> str:
    """
    Reduce a value to its last path segment.

    Both '/' and '\\' count as separators, trailing separators are ignored
    and NUL bytes are dropped.

    Args:
        value: Raw identifier or path fragment

    Returns:
        Final segment, possibly '', '.' or '..'
    """
    value = value.replace("\x00", "").replace("\\", "/").rstrip("/")
    return value.rsplit("/", 1)[-1]


def safe_name(value: str) -> str:
    """
    Reduce a value to a filename that can only name a direct child of a directory.
    """
    segment = final_segment(value)
    if segment in _UNSAFE_NAMES:
        return PLACEHOLDER_NAME
    return segment


@dataclass(frozen=True)
class FileIdentifier:
    """
    Structured file id: the caller's raw value plus the base name and extension it names.
    """
    raw: str
    base: str
    extension: Optional[str] = None

    @property
    def filename(self) -> str:
        if self.extension is None:
            return self.base
        return f"{self.base}.{self.extension}"

    @classmethod
    def parse(
        cls,
        raw: str,
        extension: Optional[str] = None,
        legacy: bool = True
    ) -> "FileIdentifier":
        """
        Build an identifier from a raw file id.

        An explicit extension is carried as given. Without one, a segment that
        already contains a period is taken literally; otherwise, in legacy mode,
        the first underscore separates base and extension ("report_pdf" names
        "report.pdf").

        Args:
            raw: File id exactly as the caller sent it (percent-decoded)
            extension: Optional explicit extension, with or without a leading period
            legacy: Whether bare ids use the underscore encoding

        Returns:
            FileIdentifier whose filename is a single path segment
        """
        segment = final_segment(raw)
        if segment in _UNSAFE_NAMES:
            return cls(raw=raw, base=PLACEHOLDER_NAME)

        if extension:
            return cls(raw=raw, base=segment, extension=extension.strip().lstrip("."))

        if not legacy or "." in segment or "_" not in segment:
            return cls(raw=raw, base=segment)

        base, ext = segment.split("_", 1)
        return cls(raw=raw, base=base, extension=ext)


class IdentityResolver:
    """
    Resolves file ids to filesystem paths inside a single storage root.

    Resolution never fails and never touches the filesystem; existence is
    checked by the callers.
    """

    def __init__(self, root: Union[str, Path], legacy_decoding: bool = True):
        self.root = Path(root).resolve()
        self.legacy_decoding = legacy_decoding

    def identify(self, file_id: str, extension: Optional[str] = None) -> FileIdentifier:
        return FileIdentifier.parse(file_id, extension=extension, legacy=self.legacy_decoding)

    def resolve(self, identifier: Union[str, FileIdentifier]) -> Path:
        """
        Resolve a file id to its path under the storage root.

        Args:
            identifier: Raw file id or an already parsed FileIdentifier

        Returns:
            Path whose parent is always the storage root
        """
        if isinstance(identifier, str):
            identifier = self.identify(identifier)

        path = self.root / safe_name(identifier.filename)
        if identifier.raw != path.name:
            logger.debug(f"Resolved file id {identifier.raw!r} to {path.name!r}")
        return path

    def resolve_public(self, path_segment: str) -> Path:
        """
        Resolve the trailing segment of a public download URL, without id decoding.
        """
        return self.root / safe_name(path_segment)
