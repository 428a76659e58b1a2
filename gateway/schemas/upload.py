"""Pydantic schemas for the upload handshake endpoints."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from common.constants import UPLOAD_METHOD
from gateway.schemas.common import Envelope


class PrepareModel(BaseModel):
    digest_types: List[str]


class PrepareResponse(Envelope):
    data: PrepareModel


class UploadTicketModel(BaseModel):
    """Where and how to PUT the file bytes."""
    file_id: str
    method: str = UPLOAD_METHOD
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    params: Dict[str, str] = Field(default_factory=dict)
    send_back_params: Dict[str, str] = Field(default_factory=dict)


class AddressResponse(Envelope):
    data: UploadTicketModel


class CompleteDetails(BaseModel):
    name: Optional[str] = None


class CompleteUploadRequest(BaseModel):
    """Request body for upload completion: {"request": {"name": ...}}."""
    request: Optional[CompleteDetails] = None
