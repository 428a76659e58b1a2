"""Utility helper functions for the gateway routes."""

from dataclasses import asdict, is_dataclass
from typing import Any, List
from urllib.parse import quote

from fastapi import Request

from common.constants import CODE_OK, PUBLIC_PREFIX
from gateway import config


def base_url_for(request: Request) -> str:
    """
    Get the scheme://host base used in issued URLs.

    Args:
        request: Inbound request

    Returns:
        Configured public base URL, or the one the request arrived on
    """
    if config.PUBLIC_BASE_URL:
        return config.PUBLIC_BASE_URL
    return f"{request.url.scheme}://{request.url.netloc}"


def public_url(base_url: str, filename: str) -> str:
    """
    Build the public download URL of a stored file, percent-encoding the name.
    """
    return f"{base_url.rstrip('/')}{PUBLIC_PREFIX}/{quote(filename, safe='')}"


def parse_user_ids(user_ids: str) -> List[str]:
    """
    Parse comma-separated user ids into a list.

    Args:
        user_ids: Comma-separated ids (e.g., "alice,bob")

    Returns:
        List of trimmed, non-empty ids in request order
    """
    return [user_id.strip() for user_id in user_ids.split(',') if user_id.strip()]


def envelope(data: Any) -> dict:
    """
    Wrap a payload in the {code: 0, data: ...} success envelope.

    Dataclass payloads (or lists of them) are converted to dicts.
    """
    if isinstance(data, list):
        data = [asdict(item) if is_dataclass(item) else item for item in data]
    elif is_dataclass(data):
        data = asdict(data)
    return {"code": CODE_OK, "data": data}
