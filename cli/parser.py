"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DownloadCommand,
    GatewayCommand,
    InfoCommand,
    PermissionCommand,
    UploadCommand,
    UsersCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()
    args = tokens[1:]

    if command_name == "info":
        return InfoCommand(file_id=_single_file_id("info", args))
    elif command_name == "permission":
        return PermissionCommand(file_id=_single_file_id("permission", args))
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "download":
        return _parse_download(args)
    elif command_name == "users":
        return _parse_users(args)
    elif command_name == "gateway":
        return _parse_gateway(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _single_file_id(command_name: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: <file_id>")
    return args[0]


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [file_id]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("upload requires 1 or 2 arguments: <path> [file_id]")

    file_id = args[1] if len(args) > 1 else None
    return UploadCommand(file_path=args[0], file_id=file_id)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <file_id> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <file_id> [output_path]")

    output_path = args[1] if len(args) > 1 else None
    return DownloadCommand(file_id=args[0], output_path=output_path)


def _parse_users(args: list[str]) -> UsersCommand:
    """Parse 'users <user_id> [user_id ...]', accepting comma-separated ids too."""
    user_ids = [part.strip() for arg in args for part in arg.split(",") if part.strip()]
    if not user_ids:
        raise ParseError("users requires at least one user id")

    return UsersCommand(user_ids=tuple(user_ids))


def _parse_gateway(args: list[str]) -> GatewayCommand:
    """Parse 'gateway [<host> <port>]' command."""
    if not args:
        return GatewayCommand()
    if len(args) != 2:
        raise ParseError("gateway takes no arguments or exactly 2: <host> <port>")

    host, port = args
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ParseError(f"Invalid port: {port}")
    return GatewayCommand(host=host, port=int(port))
