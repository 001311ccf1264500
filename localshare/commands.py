"""Command handler functions for shell operations."""

from typing import Awaitable, Callable

from common.logging_config import get_logger
from localshare.app import LocalShareApp
from localshare.models import (
    CancelCommand,
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
from localshare.transfers import ConfirmCallback
from localshare.utils import format_file_size, format_listing

logger = get_logger(__name__)

PasswordPrompt = Callable[[], Awaitable[str]]

ADMIN_LOGIN_HINT = "Admin login required. Use: login <username>"
PIN_HINT = "This server is PIN protected. Use: pin <pin>"


def _locked_message(app: LocalShareApp) -> str | None:
    if app.server_config is None:
        return "Not connected to server. Restart to try again."
    if not app.access.pin_verified:
        return PIN_HINT
    return None


def _admin_hint(app: LocalShareApp) -> str:
    return ADMIN_LOGIN_HINT if app.access.admin_login_required else ""


async def handle_pin(cmd: PinCommand, app: LocalShareApp) -> str:
    """
    Handle 'pin' command.

    Returns:
        The listing once access is granted, otherwise nothing
    """
    if await app.verify_pin(cmd.pin):
        return format_listing(app.registry.files)
    return ""


async def handle_login(cmd: LoginCommand, app: LocalShareApp, ask_password: PasswordPrompt) -> str:
    """
    Handle 'login' command.

    Args:
        cmd: LoginCommand with username and optional password
        app: Client session
        ask_password: Prompt used when the password was not typed inline

    Returns:
        Empty string; the outcome is reported through notifications
    """
    app.access.open_admin_login()
    password = cmd.password
    if password is None:
        try:
            password = await ask_password()
        except (KeyboardInterrupt, EOFError):
            app.access.cancel_admin_login()
            return "Login cancelled."
    await app.admin_login(cmd.username, password)
    return ""


async def handle_logout(cmd: LogoutCommand, app: LocalShareApp) -> str:
    await app.admin_logout()
    return ""


async def handle_list(cmd: ListCommand, app: LocalShareApp) -> str:
    locked = _locked_message(app)
    if locked:
        return locked
    return format_listing(app.registry.files)


async def handle_refresh(cmd: RefreshCommand, app: LocalShareApp) -> str:
    locked = _locked_message(app)
    if locked:
        return locked
    if await app.refresh():
        return format_listing(app.registry.files)
    return _locked_message(app) or ""


async def handle_select(cmd: SelectCommand, app: LocalShareApp) -> str:
    if not app.select_file(cmd.path):
        return ""
    pending = app.transfers.pending
    return f"Selected {pending.name} ({format_file_size(pending.size)}). Type 'upload' to send it."


async def handle_cancel(cmd: CancelCommand, app: LocalShareApp) -> str:
    if app.transfers.pending is None:
        return "No file selected."
    app.cancel_upload()
    return "Selection cleared."


async def handle_upload(cmd: UploadCommand, app: LocalShareApp) -> str:
    """
    Handle 'upload' command.

    Returns:
        The refreshed listing on success, a login hint after a 401
    """
    logger.info(f"Executing upload command: path={cmd.path}")
    if cmd.path is not None and not app.select_file(cmd.path):
        return ""
    if await app.upload():
        return format_listing(app.registry.files)
    return _admin_hint(app)


async def handle_download(cmd: DownloadCommand, app: LocalShareApp) -> str:
    logger.info(f"Executing download command: filename={cmd.filename} dest_dir={cmd.dest_dir}")
    saved = await app.download(cmd.filename, cmd.dest_dir)
    if saved is None:
        return ""
    return f"Saved to: {saved.absolute()}"


async def handle_delete(cmd: DeleteCommand, app: LocalShareApp, confirm: ConfirmCallback) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with filename
        app: Client session
        confirm: Asks the user to confirm the irreversible delete

    Returns:
        The refreshed listing on success, a login hint after a 401
    """
    logger.info(f"Executing delete command: filename={cmd.filename}")
    if await app.delete(cmd.filename, confirm):
        return format_listing(app.registry.files)
    return _admin_hint(app)


async def handle_status(cmd: StatusCommand, app: LocalShareApp) -> str:
    config = app.server_config
    lines = [f"Server:  {app.context.settings.get_base_url()}"]
    if config is None:
        lines.append("State:   not connected")
        return '\n'.join(lines)

    lines.append(f"Access:  {app.access.state.value}" + (" (PIN protected)" if config.pin_protected else ""))
    admin = app.access.admin.value
    if config.admin_required:
        admin += " (required for upload and delete)"
    lines.append(f"Admin:   {admin}")
    lines.append(f"Limit:   {format_file_size(config.max_file_size)} per file")
    lines.append(f"Files:   {len(app.registry.files)}")

    pending = app.transfers.pending
    if pending is not None:
        state = "uploading" if app.transfers.uploading else "pending"
        lines.append(f"Upload:  {pending.name} ({format_file_size(pending.size)}, {state})")
    return '\n'.join(lines)


async def handle_reset(cmd: ResetCommand, app: LocalShareApp) -> str:
    state = await app.reset()
    return f"Session reset ({state.value})."
