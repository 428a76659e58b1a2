"""Public byte-stream route for stored files."""

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse

from common.constants import CODE_NOT_FOUND, PUBLIC_PREFIX
from gateway.identity import IdentityResolver
from gateway.metadata import MetadataProvider
from gateway.schemas.common import ErrorResponse
from gateway.service_locator import get_metadata_provider, get_resolver

router = APIRouter(
    prefix=PUBLIC_PREFIX,
    tags=["Public"],
    responses={
        404: {"model": ErrorResponse, "description": "File not found"}
    }
)


@router.get("/{path:path}")
async def download_public_file(
    path: str,
    resolver: IdentityResolver = Depends(get_resolver),
    metadata: MetadataProvider = Depends(get_metadata_provider)
):
    """
    Stream a stored file as an attachment.

    Only the last segment of the requested path is used, so nothing outside
    the storage root can be served.

    Raises:
        - 404: File not found
    """
    file_path = resolver.resolve_public(path)
    if not path or not await run_in_threadpool(metadata.exists, file_path):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"code": CODE_NOT_FOUND, "message": "file not found"}
        )

    return FileResponse(
        file_path,
        filename=file_path.name,
        content_disposition_type="attachment"
    )
