"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class InfoCommand:
    """Show metadata of a file."""

    file_id: str
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file through the upload handshake."""

    file_path: str
    file_id: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by file id."""

    file_id: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class PermissionCommand:
    """Show capabilities on a file."""

    file_id: str
    command: Literal["permission"] = "permission"


@dataclass(frozen=True)
class UsersCommand:
    """Look up users by id."""

    user_ids: tuple[str, ...]
    command: Literal["users"] = "users"


@dataclass(frozen=True)
class GatewayCommand:
    """Show the gateway address, or change it when host and port are given."""

    host: str | None = None
    port: int | None = None
    command: Literal["gateway"] = "gateway"


CommandRequest = (
    InfoCommand
    | UploadCommand
    | DownloadCommand
    | PermissionCommand
    | UsersCommand
    | GatewayCommand
)
