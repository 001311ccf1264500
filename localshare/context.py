"""Shared application state passed to every client component."""

from dataclasses import dataclass
from typing import Optional

from localshare.api_client import ShareApiClient
from localshare.config import Config
from localshare.notifications import NotificationCenter
from localshare.schemas import ServerConfig


@dataclass
class AppContext:
    """
    Process-wide state of one client session.

    server_config stays None until the bootstrap succeeds.
    """

    settings: Config
    client: ShareApiClient
    notifications: NotificationCenter
    server_config: Optional[ServerConfig] = None
