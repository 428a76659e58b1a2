"""File metadata, download and permission API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from common.constants import API_PREFIX
from gateway.digest import DigestComputer
from gateway.exceptions import FileReadError, NotFoundError
from gateway.identity import IdentityResolver
from gateway.metadata import MetadataProvider
from gateway.permissions import PermissionDescriptor
from gateway.schemas.common import ErrorResponse
from gateway.schemas.files import DownloadInfoResponse, FileRecordResponse, PermissionResponse
from gateway.service_locator import (
    get_digest_computer,
    get_metadata_provider,
    get_permission_descriptor,
    get_resolver
)
from gateway.utils import base_url_for, envelope, public_url

router = APIRouter(
    prefix=f"{API_PREFIX}/files",
    tags=["Files"],
    responses={
        500: {"model": ErrorResponse, "description": "File could not be read"}
    }
)

EXTENSION_QUERY = Query(None, description="Explicit file extension; disables underscore decoding of the id")


@router.get("/{file_id:path}/download", response_model=DownloadInfoResponse)
async def get_download_info(
    file_id: str,
    request: Request,
    extension: Optional[str] = EXTENSION_QUERY,
    resolver: IdentityResolver = Depends(get_resolver),
    metadata: MetadataProvider = Depends(get_metadata_provider),
    digest_computer: DigestComputer = Depends(get_digest_computer)
):
    """
    Issue a download URL and content digest for a file.

    Parameters:
        - file_id: Caller-supplied file id (percent-decoded)
        - extension: Optional explicit extension

    Returns:
        - url: Absolute /public URL of the file
        - digest: Lowercase hex content digest
        - digest_type: Digest algorithm label
        - headers: Extra headers for the download request (always empty)

    Raises:
        - code 40004: File not found
        - code 50000: File could not be read
    """
    path = resolver.resolve(resolver.identify(file_id, extension))
    if not await run_in_threadpool(metadata.exists, path):
        raise NotFoundError(f"File not found: {file_id}")

    try:
        digest, digest_type = await run_in_threadpool(digest_computer.digest, path)
    except FileNotFoundError:
        raise NotFoundError(f"File not found: {file_id}")
    except OSError as e:
        raise FileReadError(f"Failed to read {path.name}: {e.strerror or e}") from e

    return envelope({
        "url": public_url(base_url_for(request), path.name),
        "digest": digest,
        "digest_type": digest_type,
        "headers": {},
    })


@router.get("/{file_id:path}/permission", response_model=PermissionResponse)
async def get_permission(
    file_id: str,
    extension: Optional[str] = EXTENSION_QUERY,
    resolver: IdentityResolver = Depends(get_resolver),
    permissions: PermissionDescriptor = Depends(get_permission_descriptor)
):
    """
    Return the capability set on an existing file.

    Raises:
        - code 40004: File not found
    """
    identifier = resolver.identify(file_id, extension)
    permission_set = await run_in_threadpool(permissions.permissions_for, identifier)
    return envelope(permission_set)


@router.get("/{file_id:path}", response_model=FileRecordResponse)
async def get_file_metadata(
    file_id: str,
    extension: Optional[str] = EXTENSION_QUERY,
    resolver: IdentityResolver = Depends(get_resolver),
    metadata: MetadataProvider = Depends(get_metadata_provider)
):
    """
    Return file metadata. Registered last so the suffixed routes match first.

    Returns:
        - FileRecord with id echoing the request's file id

    Raises:
        - code 40004: File not found
    """
    path = resolver.resolve(resolver.identify(file_id, extension))
    record = await run_in_threadpool(metadata.describe, path, file_id)
    return envelope(record)
