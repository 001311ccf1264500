"""Command parser for shell input."""

import shlex

from localshare.models import (
    CancelCommand,
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    LogoutCommand,
    PinCommand,
    RefreshCommand,
    ResetCommand,
    SelectCommand,
    StatusCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from the shell

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

    parser = _PARSERS.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(args)


def _no_args(name: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{name} takes no arguments")


def _parse_pin(args: list[str]) -> PinCommand:
    """Parse 'pin <pin>' command."""
    if len(args) != 1:
        raise ParseError("pin requires exactly 1 argument: <pin>")
    return PinCommand(pin=args[0])


def _parse_login(args: list[str]) -> LoginCommand:
    """Parse 'login <username> [password]' command."""
    if len(args) not in (1, 2):
        raise ParseError("login requires <username> and optionally <password>")

    username = args[0]
    password = args[1] if len(args) == 2 else None
    return LoginCommand(username=username, password=password)


def _parse_logout(args: list[str]) -> LogoutCommand:
    _no_args("logout", args)
    return LogoutCommand()


def _parse_list(args: list[str]) -> ListCommand:
    _no_args("list", args)
    return ListCommand()


def _parse_refresh(args: list[str]) -> RefreshCommand:
    _no_args("refresh", args)
    return RefreshCommand()


def _parse_select(args: list[str]) -> SelectCommand:
    """Parse 'select <path>' command."""
    if len(args) != 1:
        raise ParseError("select requires exactly 1 argument: <path>")
    return SelectCommand(path=args[0])


def _parse_cancel(args: list[str]) -> CancelCommand:
    _no_args("cancel", args)
    return CancelCommand()


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload [path]' command."""
    if len(args) > 1:
        raise ParseError("upload takes at most 1 argument: [path]")
    return UploadCommand(path=args[0] if args else None)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <filename> [dest_dir]' command."""
    if len(args) not in (1, 2):
        raise ParseError("download requires <filename> and optionally <dest_dir>")

    filename = args[0]
    dest_dir = args[1] if len(args) > 1 else None
    return DownloadCommand(filename=filename, dest_dir=dest_dir)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <filename>' command."""
    if len(args) != 1:
        raise ParseError("delete requires exactly 1 argument: <filename>")
    return DeleteCommand(filename=args[0])


def _parse_status(args: list[str]) -> StatusCommand:
    _no_args("status", args)
    return StatusCommand()


def _parse_reset(args: list[str]) -> ResetCommand:
    _no_args("reset", args)
    return ResetCommand()


_PARSERS = {
    "pin": _parse_pin,
    "login": _parse_login,
    "logout": _parse_logout,
    "list": _parse_list,
    "refresh": _parse_refresh,
    "select": _parse_select,
    "cancel": _parse_cancel,
    "upload": _parse_upload,
    "download": _parse_download,
    "delete": _parse_delete,
    "status": _parse_status,
    "reset": _parse_reset,
}
