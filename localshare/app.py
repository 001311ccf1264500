"""Coordinator that owns one client session."""

from pathlib import Path
from typing import Optional, Union

import httpx

from common.logging_config import get_logger
from localshare.access import AccessControl, AccessState
from localshare.api_client import ShareApiClient
from localshare.bootstrap import ConfigBootstrap
from localshare.config import Config
from localshare.context import AppContext
from localshare.notifications import NotificationCenter
from localshare.registry import FileRegistry
from localshare.transfers import ConfirmCallback, TransferOrchestrator

logger = get_logger(__name__)


class LocalShareApp:
    """
    Wires the session components around a shared AppContext.

    The bootstrap runs first; the registry is refreshed once every time
    access is granted, whether by the config (no PIN) or by a PIN.
    """

    def __init__(self, settings: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            settings: Client configuration
            transport: Optional transport override (testing)
        """
        self.context = AppContext(
            settings=settings,
            client=ShareApiClient(settings, transport=transport),
            notifications=NotificationCenter(ttl=settings.get_notification_ttl()),
        )
        self.access = AccessControl(self.context)
        self.bootstrap = ConfigBootstrap(self.context, self.access)
        self.registry = FileRegistry(self.context, self.access)
        self.transfers = TransferOrchestrator(self.context, self.access, self.registry)

    @property
    def notifications(self) -> NotificationCenter:
        return self.context.notifications

    @property
    def server_config(self):
        return self.context.server_config

    async def start(self) -> AccessState:
        await self.bootstrap.load()
        if self.access.pin_verified:
            await self.registry.refresh()
        return self.access.state

    async def verify_pin(self, pin: str) -> bool:
        if not await self.access.verify_pin(pin):
            return False
        await self.registry.refresh()
        return True

    async def admin_login(self, username: str, password: str) -> bool:
        return await self.access.admin_login(username, password)

    async def admin_logout(self) -> None:
        await self.access.admin_logout()

    async def refresh(self) -> bool:
        return await self.registry.refresh()

    def select_file(self, path: Union[str, Path]) -> bool:
        return self.transfers.select_file(path)

    def cancel_upload(self) -> None:
        self.transfers.cancel_upload()

    async def upload(self) -> bool:
        return await self.transfers.upload()

    async def download(self, filename: str, dest_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        return await self.transfers.download(filename, dest_dir)

    async def delete(self, filename: str, confirm: ConfirmCallback) -> bool:
        return await self.transfers.delete(filename, confirm)

    async def reset(self) -> AccessState:
        """Recover from an expired server session."""
        self.registry.clear()
        self.transfers.cancel_upload()
        self.notifications.clear()
        state = self.access.reset()
        if self.access.pin_verified:
            await self.registry.refresh()
        return state

    async def close(self) -> None:
        self.notifications.clear()
        await self.context.client.close()
        logger.info("Session closed")

    async def __aenter__(self) -> 'LocalShareApp':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
