"""Upload handshake API routes: prepare, address, storage, complete."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from common.constants import API_PREFIX
from gateway.schemas.common import ErrorResponse
from gateway.schemas.files import FileRecordResponse
from gateway.schemas.upload import AddressResponse, CompleteUploadRequest, PrepareResponse
from gateway.service_locator import get_upload_session
from gateway.upload_session import UploadSession
from gateway.utils import base_url_for, envelope

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=f"{API_PREFIX}/files",
    tags=["Upload"],
    responses={
        403: {"model": ErrorResponse, "description": "Upload ticket rejected"},
        413: {"model": ErrorResponse, "description": "Payload too large"},
        500: {"model": ErrorResponse, "description": "Storage failure"}
    }
)

EXTENSION_QUERY = Query(None, description="Explicit file extension; disables underscore decoding of the id")


@router.get("/{file_id:path}/upload/prepare", response_model=PrepareResponse)
async def prepare_upload(
    file_id: str,
    session: UploadSession = Depends(get_upload_session)
):
    """
    Advertise the digest types the gateway computes. Never fails.
    """
    return envelope({"digest_types": session.prepare(file_id)})


@router.post("/{file_id:path}/upload/address", response_model=AddressResponse)
async def upload_address(
    file_id: str,
    request: Request,
    extension: Optional[str] = EXTENSION_QUERY,
    session: UploadSession = Depends(get_upload_session)
):
    """
    Issue an upload ticket pointing at the storage endpoint.

    Returns:
        - file_id: File id as requested
        - method: Always PUT
        - url: Absolute storage URL, carrying the ticket token when tickets are enabled
        - headers, params: Empty
        - send_back_params: Values the client echoes on completion
    """
    ticket = session.address(file_id, base_url_for(request), extension=extension)
    return envelope(ticket)


@router.put("/{file_id:path}/upload/storage")
async def upload_storage(
    file_id: str,
    request: Request,
    ticket: Optional[str] = Query(None, description="Upload ticket token issued by the address step"),
    extension: Optional[str] = EXTENSION_QUERY,
    session: UploadSession = Depends(get_upload_session)
):
    """
    Write the raw request body over the file.

    Returns:
        - 200 with an empty body

    Raises:
        - 403 code 40003: Ticket rejected
        - 413 code 41300: Payload over the upload ceiling
        - 500 code 50000: Write failed
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        session.check_size(int(content_length))

    payload = await request.body()
    written = await run_in_threadpool(session.store, file_id, payload, ticket, extension)
    logger.debug(f"Storage step wrote {written} bytes for {file_id!r}")
    return Response(status_code=status.HTTP_200_OK)


@router.post("/{file_id:path}/upload/complete", response_model=FileRecordResponse)
async def complete_upload(
    file_id: str,
    body: Optional[CompleteUploadRequest] = Body(None),
    extension: Optional[str] = EXTENSION_QUERY,
    session: UploadSession = Depends(get_upload_session)
):
    """
    Finalize an upload and return the stored file's metadata.

    Parameters:
        - body: Optional {"request": {"name": "<display name>"}}

    Raises:
        - code 40004: Nothing stored for the file id
    """
    name = body.request.name if body and body.request else None
    record = await run_in_threadpool(session.complete, file_id, name, extension)
    return envelope(record)
