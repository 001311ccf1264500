"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import DummyHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from common.logging_config import get_logger
from localshare.app import LocalShareApp
from localshare.commands import (
    PIN_HINT,
    handle_cancel,
    handle_delete,
    handle_download,
    handle_list,
    handle_login,
    handle_logout,
    handle_pin,
    handle_refresh,
    handle_reset,
    handle_select,
    handle_status,
    handle_upload,
)
from localshare.completer import LocalShareCompleter
from localshare.constants import (
    GREEN,
    HELP_TEXT,
    LOCKED_PROMPT_TEXT,
    LOGO,
    PROMPT_TEXT,
    RED,
    RESET,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
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
from localshare.parser import ParseError, parse_command
from localshare.types import Notification, NotificationKind
from localshare.utils import format_listing

logger = get_logger(__name__)


def carries_secret(input_line: str) -> bool:
    """True for 'pin <pin>' and 'login <user> <password>' lines."""
    tokens = input_line.split()
    if not tokens:
        return False
    command = tokens[0].lower()
    return (command == "pin" and len(tokens) > 1) or (command == "login" and len(tokens) > 2)


class ShellHistory(InMemoryHistory):
    """Session history that never keeps a typed PIN or password."""

    def append_string(self, string: str) -> None:
        if carries_secret(string):
            return
        super().append_string(string)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def print_notification(notification: Notification) -> None:
    if notification.kind is NotificationKind.ERROR:
        print(f"{RED}✗ {notification.message}{RESET}")
    else:
        print(f"{GREEN}✓ {notification.message}{RESET}")


class Shell:
    """Interactive front-end over one LocalShareApp session."""

    def __init__(self, app: LocalShareApp):
        self.app = app
        self.session: PromptSession = PromptSession(
            completer=LocalShareCompleter(app.registry.names),
            history=ShellHistory(),
            style=STYLE,
        )
        # Answers to password and confirmation prompts are never recalled.
        self.reply_session: PromptSession = PromptSession(history=DummyHistory(), style=STYLE)

    async def ask_password(self) -> str:
        return await self.reply_session.prompt_async("Password: ", is_password=True)

    async def confirm(self, filename: str) -> bool:
        answer = await self.reply_session.prompt_async(f"Delete {filename}? [y/N] ")
        return answer.strip().lower() in ("y", "yes")

    async def dispatch_command(self, cmd_obj) -> str:
        """Dispatch parsed command to appropriate handler."""
        app = self.app
        if isinstance(cmd_obj, PinCommand):
            return await handle_pin(cmd_obj, app)
        elif isinstance(cmd_obj, LoginCommand):
            return await handle_login(cmd_obj, app, self.ask_password)
        elif isinstance(cmd_obj, LogoutCommand):
            return await handle_logout(cmd_obj, app)
        elif isinstance(cmd_obj, ListCommand):
            return await handle_list(cmd_obj, app)
        elif isinstance(cmd_obj, RefreshCommand):
            return await handle_refresh(cmd_obj, app)
        elif isinstance(cmd_obj, SelectCommand):
            return await handle_select(cmd_obj, app)
        elif isinstance(cmd_obj, CancelCommand):
            return await handle_cancel(cmd_obj, app)
        elif isinstance(cmd_obj, UploadCommand):
            return await handle_upload(cmd_obj, app)
        elif isinstance(cmd_obj, DownloadCommand):
            return await handle_download(cmd_obj, app)
        elif isinstance(cmd_obj, DeleteCommand):
            return await handle_delete(cmd_obj, app, self.confirm)
        elif isinstance(cmd_obj, StatusCommand):
            return await handle_status(cmd_obj, app)
        elif isinstance(cmd_obj, ResetCommand):
            return await handle_reset(cmd_obj, app)
        else:
            return f"Unknown command type: {type(cmd_obj)}"

    def _prompt(self) -> list[tuple[str, str]]:
        if self.app.server_config is not None and not self.app.access.pin_verified:
            return [("class:locked", LOCKED_PROMPT_TEXT)]
        return [("class:prompt", PROMPT_TEXT)]

    async def run(self) -> None:
        """Start the interactive loop."""
        clear_screen()
        show_welcome()

        unsubscribe = self.app.notifications.subscribe(print_notification)
        try:
            with patch_stdout():
                print(f"Connecting to {self.app.context.settings.get_base_url()}...")
                await self.app.start()
                if self.app.server_config is not None:
                    if self.app.access.pin_verified:
                        print(format_listing(self.app.registry.files))
                    else:
                        print(PIN_HINT)
                await self._loop()
        finally:
            unsubscribe()

    async def _loop(self) -> None:
        while True:
            try:
                user_input = await self.session.prompt_async(self._prompt())

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome()
                    continue

                cmd_obj = parse_command(user_input)
                result = await self.dispatch_command(cmd_obj)
                if result:
                    print(result)

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break
            except Exception as e:
                logger.error(f"Command failed: {e}", exc_info=True)
                print(f"Unexpected error: {e}")


async def repl_loop(app: LocalShareApp) -> None:
    await Shell(app).run()
