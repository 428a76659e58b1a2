"""Pydantic schemas for file metadata, download and permission endpoints."""

from typing import Dict
from pydantic import BaseModel, ConfigDict, Field

from gateway.schemas.common import Envelope


class FileRecordModel(BaseModel):
    """File metadata as exposed to clients."""
    id: str
    name: str
    version: int
    size: int
    create_time: int
    modify_time: int
    creator_id: str
    modifier_id: str


class FileRecordResponse(Envelope):
    data: FileRecordModel


class DownloadInfoModel(BaseModel):
    """Download address and content digest of a file."""
    url: str
    digest: str
    digest_type: str
    headers: Dict[str, str] = Field(default_factory=dict)


class DownloadInfoResponse(Envelope):
    data: DownloadInfoModel


class PermissionModel(BaseModel):
    """Capability flags (0/1) of a user on a file."""
    # "copy" would shadow BaseModel.copy
    model_config = ConfigDict(populate_by_name=True)

    user_id: str
    read: int
    update: int
    download: int
    rename: int
    history: int
    copy_: int = Field(alias="copy")
    print: int
    saveas: int
    comment: int


class PermissionResponse(Envelope):
    data: PermissionModel
