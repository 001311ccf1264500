"""Command request data types for the shell."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class PinCommand:
    """Submit a PIN."""

    pin: str
    command: Literal["pin"] = "pin"


@dataclass(frozen=True)
class LoginCommand:
    """Admin login; password is prompted for when missing."""

    username: str
    password: str | None = None
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class LogoutCommand:
    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class ListCommand:
    """Show the cached listing."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class RefreshCommand:
    command: Literal["refresh"] = "refresh"


@dataclass(frozen=True)
class SelectCommand:
    """Select a local file for upload."""

    path: str
    command: Literal["select"] = "select"


@dataclass(frozen=True)
class CancelCommand:
    command: Literal["cancel"] = "cancel"


@dataclass(frozen=True)
class UploadCommand:
    """Upload the pending file, selecting path first when given."""

    path: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by filename."""

    filename: str
    dest_dir: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete file by filename."""

    filename: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class StatusCommand:
    command: Literal["status"] = "status"


@dataclass(frozen=True)
class ResetCommand:
    command: Literal["reset"] = "reset"


CommandRequest = (
    PinCommand
    | LoginCommand
    | LogoutCommand
    | ListCommand
    | RefreshCommand
    | SelectCommand
    | CancelCommand
    | UploadCommand
    | DownloadCommand
    | DeleteCommand
    | StatusCommand
    | ResetCommand
)
