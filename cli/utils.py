"""Formatting and naming helpers for CLI output."""

from datetime import datetime
from typing import Dict, List, Tuple
from urllib.parse import unquote, urlsplit

SIZE_UNITS = ('B', 'KiB', 'MiB', 'GiB', 'TiB', 'PiB')


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count with binary (1024-based) units.

    Args:
        size_bytes: File size in bytes

    Returns:
        e.g. "512 B", "1.50 MiB"
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    unit_index = 0
    while size >= 1024.0 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024.0
        unit_index += 1
    return f"{size:.2f} {SIZE_UNITS[unit_index]}"


def format_timestamp(epoch_seconds: int) -> str:
    """Render whole epoch seconds as a local ISO-8601 timestamp."""
    return datetime.fromtimestamp(epoch_seconds).isoformat()


def split_capabilities(flags: Dict[str, int]) -> Tuple[List[str], List[str]]:
    """
    Split 0/1 capability flags into granted and denied names, keeping order.
    """
    granted = [name for name, flag in flags.items() if flag]
    denied = [name for name, flag in flags.items() if not flag]
    return granted, denied


def is_error_message(message: str) -> bool:
    """Whether a client result message reports a failure."""
    return message.startswith('Error')


def local_filename(url: str, fallback: str) -> str:
    """
    Name for a downloaded file: the last segment of the URL path.

    Separators inside the percent-decoded segment are honoured, so the result
    can only name a direct child of the output directory. When the URL yields
    no usable name, the last segment of fallback is used instead.
    """
    for candidate in (unquote(urlsplit(url).path), fallback):
        name = candidate.replace('\x00', '').replace('\\', '/').rstrip('/').rsplit('/', 1)[-1]
        if name not in ('', '.', '..'):
            return name
    return 'download'
