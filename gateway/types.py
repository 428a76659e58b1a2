"""Gateway data type definitions."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from common.constants import CAPABILITIES, FILE_VERSION, UPLOAD_METHOD


@dataclass(frozen=True)
class FileRecord:
    """
    Snapshot of a stored file, rebuilt from a stat call on every request.
    """
    id: str
    name: str
    size: int
    create_time: int
    modify_time: int
    creator_id: str
    modifier_id: str
    version: int = FILE_VERSION


@dataclass(frozen=True)
class UploadTicket:
    """
    Where and how a client submits the raw bytes of an upload.
    """
    file_id: str
    url: str
    method: str = UPLOAD_METHOD
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    send_back_params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TicketGrant:
    """
    Server-side record of an issued upload ticket.
    """
    token: str
    file_id: str
    filename: str
    issued_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class PermissionSet:
    user_id: str
    read: int = 1
    update: int = 1
    download: int = 1
    rename: int = 1
    history: int = 1
    copy: int = 1
    print: int = 1
    saveas: int = 1
    comment: int = 1


@dataclass(frozen=True)
class User:
    id: str
    name: str
    avatar_url: str = ""


@dataclass(frozen=True)
class AccessPolicy:
    """
    Identity and capability policy applied to every file.

    The default policy is a single principal holding every capability.
    """
    principal_id: str = "system"
    principal_name: str = "System"
    denied_capabilities: Tuple[str, ...] = ()

    def capabilities(self) -> Dict[str, int]:
        """
        Capability flags as 0/1 integers, keyed by capability name.
        """
        denied = set(self.denied_capabilities)
        return {name: 0 if name in denied else 1 for name in CAPABILITIES}

    def permission_set(self, user_id: str = None) -> PermissionSet:
        return PermissionSet(user_id=user_id or self.principal_id, **self.capabilities())
