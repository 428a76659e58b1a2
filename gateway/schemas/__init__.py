"""Pydantic schemas for API requests and responses."""

from gateway.schemas.common import Envelope, ErrorResponse
from gateway.schemas.files import (
    FileRecordModel,
    FileRecordResponse,
    DownloadInfoModel,
    DownloadInfoResponse,
    PermissionModel,
    PermissionResponse
)
from gateway.schemas.upload import (
    PrepareModel,
    PrepareResponse,
    UploadTicketModel,
    AddressResponse,
    CompleteDetails,
    CompleteUploadRequest
)
from gateway.schemas.users import UserModel, UsersResponse

__all__ = [
    "Envelope",
    "ErrorResponse",
    "FileRecordModel",
    "FileRecordResponse",
    "DownloadInfoModel",
    "DownloadInfoResponse",
    "PermissionModel",
    "PermissionResponse",
    "PrepareModel",
    "PrepareResponse",
    "UploadTicketModel",
    "AddressResponse",
    "CompleteDetails",
    "CompleteUploadRequest",
    "UserModel",
    "UsersResponse"
]
