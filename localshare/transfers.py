"""Upload, download and delete orchestration."""

import asyncio
import inspect
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

import httpx

from common.logging_config import get_logger
from localshare.access import AccessControl
from localshare.api_client import error_message
from localshare.constants import DOWNLOAD_CHUNK_SIZE
from localshare.context import AppContext
from localshare.exceptions import (
    AccessDeniedError,
    AuthorizationLost,
    ConnectivityError,
    OperationError,
    ValidationError,
)
from localshare.registry import FileRegistry
from localshare.types import NotificationKind, PendingUpload
from localshare.utils import format_file_size

logger = get_logger(__name__)

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


class TransferOrchestrator:
    """
    Runs file operations against the server.

    Mutations never touch the listing locally: a success triggers one
    registry refresh instead. Operations on different files may overlap;
    a second operation on a file that already has one in flight is refused.
    """

    def __init__(self, context: AppContext, access: AccessControl, registry: FileRegistry):
        self.context = context
        self.access = access
        self.registry = registry
        self.pending: Optional[PendingUpload] = None
        self._busy: set[str] = set()
        self._uploads: set[str] = set()

    @property
    def uploading(self) -> bool:
        return bool(self._uploads)

    def in_flight(self) -> frozenset[str]:
        return frozenset(self._busy)

    def select_file(self, path: Union[str, Path]) -> bool:
        """
        Register a local file as the pending upload.

        Oversized or unreadable files are rejected before anything is sent.

        Args:
            path: Local file path

        Returns:
            True if the file is now the pending upload
        """
        notifications = self.context.notifications
        try:
            pending = self._validate_selection(Path(path).expanduser())
        except ValidationError as e:
            notifications.error(str(e))
            return False

        self.pending = pending
        notifications.dismiss_error()
        logger.info(f"Selected {pending.name} ({format_file_size(pending.size)}) for upload")
        return True

    def _validate_selection(self, path: Path) -> PendingUpload:
        try:
            stat = path.stat()
        except OSError:
            raise ValidationError(f"File not found: {path}")
        if not path.is_file():
            raise ValidationError(f"Not a file: {path}")

        config = self.context.server_config
        if config is None:
            raise ValidationError("Still connecting to server")
        if stat.st_size > config.max_file_size:
            raise ValidationError(f"File too large. Max size: {config.max_file_size_mb} MB")

        return PendingUpload(path=path, name=path.name, size=stat.st_size)

    def cancel_upload(self) -> None:
        self.pending = None

    def _claim(self, target: str) -> bool:
        try:
            self.access.ensure_unlocked()
        except AccessDeniedError as e:
            self.context.notifications.error(str(e))
            return False

        if target in self._busy:
            self.context.notifications.error(f"An operation on {target} is already in progress")
            return False

        self._busy.add(target)
        return True

    @staticmethod
    def _raise_for_status(response: httpx.Response, fallback: str) -> None:
        if response.status_code == 401:
            raise AuthorizationLost("Admin authentication required")
        if not response.is_success:
            raise OperationError(error_message(response, fallback), status_code=response.status_code)

    def _settle(self, target: str, response: httpx.Response, fallback: str) -> bool:
        """
        Turn a mutation response into a notification.

        A 401 reopens admin login; any other failure leaves session and
        listing untouched.

        Returns:
            True if the server accepted the mutation
        """
        try:
            self._raise_for_status(response, fallback)
        except AuthorizationLost as e:
            logger.info(f"Operation on {target} needs admin authentication")
            self.context.notifications.error(str(e))
            self.access.admin_required()
            return False
        except OperationError as e:
            logger.warning(f"Operation on {target} failed [status={e.status_code}]: {e}")
            self.context.notifications.error(str(e))
            return False
        return True

    async def upload(self) -> bool:
        """
        Send the pending upload.

        The selection survives every failure so the user can retry,
        e.g. after an admin login.

        Returns:
            True if the server stored the file
        """
        pending = self.pending
        if pending is None:
            self.context.notifications.error("No file selected")
            return False
        if not self._claim(pending.name):
            return False

        notifications = self.context.notifications
        notifications.dismiss_error()
        notifications.dismiss(NotificationKind.SUCCESS)
        self._uploads.add(pending.name)
        try:
            try:
                content = await asyncio.to_thread(pending.path.read_bytes)
            except OSError as e:
                logger.error(f"Cannot read {pending.path}: {e}")
                notifications.error("Failed to upload file")
                return False

            logger.info(f"Uploading {pending.name} ({format_file_size(len(content))})")
            try:
                response = await self.context.client.upload(pending.name, content)
            except ConnectivityError as e:
                logger.error(f"Upload of {pending.name} failed: {e}")
                notifications.error("Failed to upload file")
                return False
        finally:
            self._uploads.discard(pending.name)
            self._busy.discard(pending.name)

        if not self._settle(pending.name, response, "Failed to upload file"):
            return False

        if self.pending is pending:
            self.pending = None
        notifications.success("File uploaded successfully")
        await self.registry.refresh()
        return True

    async def download(self, filename: str, dest_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Fetch a file and save it under its original name.

        Args:
            filename: Remote file name, passed to the server as-is
            dest_dir: Directory to save into (defaults to the configured download directory)

        Returns:
            Path of the saved file, or None on failure
        """
        if not self._claim(filename):
            return None

        notifications = self.context.notifications
        target_dir = Path(dest_dir).expanduser() if dest_dir else self.context.settings.get_download_dir()
        # The remote name is opaque; only its last component names the local file.
        output_file = target_dir / Path(filename).name
        partial: Optional[Path] = None

        try:
            async with self.context.client.download(filename) as response:
                if not response.is_success:
                    await response.aread()
                    logger.warning(f"Download of {filename} failed [status={response.status_code}]")
                    notifications.error("Failed to download file")
                    return None

                target_dir.mkdir(parents=True, exist_ok=True)
                written = 0
                # An existing file of the same name is only replaced once every byte has arrived.
                with tempfile.NamedTemporaryFile(
                    dir=target_dir, prefix=f".{output_file.name}.", suffix='.part', delete=False
                ) as f:
                    partial = Path(f.name)
                    async for chunk in response.aiter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
                        written += len(chunk)
            partial.replace(output_file)
        except ConnectivityError as e:
            logger.error(f"Download of {filename} failed: {e}")
            self._discard_partial(partial)
            notifications.error("Failed to download file")
            return None
        except OSError as e:
            logger.error(f"Error writing {output_file}: {e}")
            self._discard_partial(partial)
            notifications.error("Failed to download file")
            return None
        finally:
            self._busy.discard(filename)

        logger.info(f"Downloaded {filename} ({format_file_size(written)}) to {output_file}")
        notifications.success(f"Downloaded {filename}")
        return output_file

    @staticmethod
    def _discard_partial(partial: Optional[Path]) -> None:
        if partial is None:
            return
        try:
            partial.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove partial download {partial}: {e}")

    async def delete(self, filename: str, confirm: ConfirmCallback) -> bool:
        """
        Delete a remote file after the user confirms.

        Args:
            filename: Remote file name
            confirm: Called with the file name; no request is sent unless it returns True

        Returns:
            True if the server deleted the file
        """
        answer = confirm(filename)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug(f"Delete of {filename} not confirmed")
            return False

        if not self._claim(filename):
            return False

        notifications = self.context.notifications
        try:
            response = await self.context.client.delete(filename)
        except ConnectivityError as e:
            logger.error(f"Delete of {filename} failed: {e}")
            notifications.error("Failed to delete file")
            return False
        finally:
            self._busy.discard(filename)

        if not self._settle(filename, response, "Failed to delete file"):
            return False

        notifications.success(f"Deleted {filename}")
        await self.registry.refresh()
        return True
