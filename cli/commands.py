"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Callable, Dict, Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.gateway_client import GatewayClient
from cli.models import (
    DownloadCommand,
    GatewayCommand,
    InfoCommand,
    PermissionCommand,
    UploadCommand,
    UsersCommand,
)

logger = get_logger(__name__)

CONFIG_PATH = Path.home() / '.filegateway' / 'config.json'

_config_path: Path = CONFIG_PATH
_client: Optional[GatewayClient] = None


def use_config(config_path: Path) -> None:
    """
    Point the CLI at another config file; the client is rebuilt on next use.
    """
    global _config_path, _client
    _config_path = config_path
    _client = None


def get_client() -> GatewayClient:
    """
    Get or create global GatewayClient instance.

    Returns:
        GatewayClient instance
    """
    global _client
    if _client is None:
        logger.debug(f"Creating GatewayClient from {_config_path}")
        _client = GatewayClient(Config(_config_path))
    return _client


def handle_info(cmd: InfoCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'info' command.

    Args:
        cmd: InfoCommand with file_id
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Metadata or error message
    """
    client = client or get_client()
    return client.info(cmd.file_id)


def handle_upload(cmd: UploadCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local file_path and optional file_id
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Upload result message
    """
    client = client or get_client()
    return client.upload(cmd.file_path, cmd.file_id)


def handle_download(cmd: DownloadCommand, client: Optional[GatewayClient] = None) -> str:
    client = client or get_client()
    return client.download(cmd.file_id, cmd.output_path)


def handle_permission(cmd: PermissionCommand, client: Optional[GatewayClient] = None) -> str:
    client = client or get_client()
    return client.permission(cmd.file_id)


def handle_users(cmd: UsersCommand, client: Optional[GatewayClient] = None) -> str:
    client = client or get_client()
    return client.users(list(cmd.user_ids))


def handle_gateway(cmd: GatewayCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'gateway' command.

    Without arguments shows the configured gateway; with host and port saves
    the new address and reconnects.
    """
    global _client
    client = client or get_client()

    if cmd.host is None:
        return f"Gateway: {client.config.get_base_url()}"

    client.config.set_gateway(cmd.host, cmd.port)
    if client is _client:
        client.session.close()
        _client = None
    logger.info(f"Gateway set to {cmd.host}:{cmd.port}")
    return f"Gateway set to {client.config.get_base_url()}"


COMMAND_HANDLERS: Dict[type, Callable[..., str]] = {
    InfoCommand: handle_info,
    UploadCommand: handle_upload,
    DownloadCommand: handle_download,
    PermissionCommand: handle_permission,
    UsersCommand: handle_users,
    GatewayCommand: handle_gateway,
}
