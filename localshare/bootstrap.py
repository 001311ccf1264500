"""One-shot fetch of the server's capabilities."""

from typing import Optional

from pydantic import ValidationError as SchemaError

from common.logging_config import get_logger
from localshare.access import AccessControl
from localshare.context import AppContext
from localshare.exceptions import ConnectivityError
from localshare.schemas import ServerConfig

logger = get_logger(__name__)


class ConfigBootstrap:
    """
    Reads GET /api/config exactly once.

    A failed read leaves the session in LOADING for good; the only way out
    is a fresh session.
    """

    def __init__(self, context: AppContext, access: AccessControl):
        self.context = context
        self.access = access
        self.attempted = False
        self.failed = False

    async def load(self) -> Optional[ServerConfig]:
        if self.attempted:
            return self.context.server_config
        self.attempted = True

        try:
            response = await self.context.client.get_config()
            if not response.is_success:
                raise ConnectivityError(f"Config request failed with status {response.status_code}")
            config = ServerConfig.model_validate(response.json())
        except (ConnectivityError, SchemaError, ValueError) as e:
            logger.error(f"Bootstrap failed: {e}")
            self.failed = True
            self.context.notifications.error("Failed to connect to server")
            return None

        self.context.server_config = config
        logger.info(
            f"Server config: pin_protected={config.pin_protected} "
            f"admin_required={config.admin_required} max_file_size={config.max_file_size}"
        )
        self.access.apply_config(config)
        return config
