"""Client-side copy of the server's file listing."""

from typing import Optional

from pydantic import ValidationError as SchemaError

from common.logging_config import get_logger
from localshare.access import AccessControl
from localshare.context import AppContext
from localshare.exceptions import AccessDeniedError, ConnectivityError
from localshare.schemas import FileEntry, FilesListResponse

logger = get_logger(__name__)


class FileRegistry:
    """
    Holds the last applied listing, in server order.

    Every refresh takes a new token; a response is applied only if its
    token is still the latest one issued, so a slow response can never
    overwrite a newer listing.
    """

    def __init__(self, context: AppContext, access: AccessControl):
        self.context = context
        self.access = access
        self._files: tuple[FileEntry, ...] = ()
        self._latest_token = 0
        self._in_flight = 0

    @property
    def files(self) -> tuple[FileEntry, ...]:
        return self._files

    @property
    def refreshing(self) -> bool:
        return self._in_flight > 0

    def names(self) -> list[str]:
        return [entry.name for entry in self._files]

    def get(self, name: str) -> Optional[FileEntry]:
        for entry in self._files:
            if entry.name == name:
                return entry
        return None

    def clear(self) -> None:
        self._files = ()
        # Responses still in flight belong to the old session.
        self._latest_token += 1

    async def refresh(self) -> bool:
        """
        Re-fetch the listing.

        Returns:
            True if a fresh listing was applied
        """
        try:
            self.access.ensure_unlocked()
        except AccessDeniedError as e:
            logger.debug(f"Refresh refused: {e}")
            return False

        self._latest_token += 1
        token = self._latest_token
        self._in_flight += 1
        try:
            return await self._fetch(token)
        finally:
            self._in_flight -= 1

    async def _fetch(self, token: int) -> bool:
        notifications = self.context.notifications

        try:
            response = await self.context.client.list_files()
        except ConnectivityError as e:
            return self._fail(token, f"Listing request failed: {e}")

        if response.status_code == 401:
            self.access.pin_expired()
            return False

        if not response.is_success:
            return self._fail(token, f"Listing request failed with status {response.status_code}")

        try:
            listing = FilesListResponse.model_validate(response.json())
        except (SchemaError, ValueError) as e:
            return self._fail(token, f"Malformed listing: {e}")

        if token != self._latest_token:
            logger.debug(f"Discarding stale listing [token={token} latest={self._latest_token}]")
            return False

        self._files = tuple(listing.files or ())
        notifications.dismiss_error()
        logger.info(f"Listing refreshed: {len(self._files)} file(s)")
        return True

    def _fail(self, token: int, reason: str) -> bool:
        logger.error(reason)
        if token == self._latest_token:
            self.context.notifications.error("Failed to fetch files")
        return False
