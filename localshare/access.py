"""PIN gating and admin session state machine."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import httpx

from common.logging_config import get_logger
from localshare.context import AppContext
from localshare.exceptions import AccessDeniedError, AuthError, ConnectivityError
from localshare.schemas import ServerConfig

logger = get_logger(__name__)


class AccessState(str, Enum):
    LOADING = "loading"
    PIN_REQUIRED = "pin_required"
    UNLOCKED = "unlocked"


class AdminState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


VALID_TRANSITIONS: dict[AccessState, set[AccessState]] = {
    AccessState.LOADING: {AccessState.PIN_REQUIRED, AccessState.UNLOCKED},
    AccessState.PIN_REQUIRED: {AccessState.UNLOCKED},
    AccessState.UNLOCKED: {AccessState.PIN_REQUIRED},
}


def _require_accepted(response: httpx.Response, message: str) -> None:
    if not response.is_success:
        logger.debug(f"Credentials rejected [status={response.status_code}]")
        raise AuthError(message)


class AccessControl:
    """
    Owns the PIN and admin axes of the client session.

    The access axis gates the file registry and every transfer. The admin
    axis is independent: it survives PIN expiry and only changes on login,
    logout, or a 401 from a privileged call. Both are local caches of the
    server's cookie session, so a 401 always wins over the cached value.
    """

    def __init__(self, context: AppContext):
        self.context = context
        self._state = AccessState.LOADING
        self._admin = AdminState.ANONYMOUS
        self.admin_login_required = False
        self.pin_candidate: Optional[str] = None

    @property
    def state(self) -> AccessState:
        return self._state

    @property
    def admin(self) -> AdminState:
        return self._admin

    @property
    def pin_verified(self) -> bool:
        return self._state is AccessState.UNLOCKED

    @property
    def admin_authenticated(self) -> bool:
        return self._admin is AdminState.AUTHENTICATED

    def _transition(self, new_state: AccessState) -> bool:
        """Move the access axis. Returns False for illegal transitions."""
        if new_state == self._state:
            return True

        if new_state not in VALID_TRANSITIONS.get(self._state, set()):
            logger.warning(f"Invalid access transition: {self._state.value} -> {new_state.value}")
            return False

        old_state = self._state
        self._state = new_state
        logger.info(f"Access state: {old_state.value} -> {new_state.value}")
        return True

    def apply_config(self, config: ServerConfig) -> AccessState:
        """Leave LOADING once the server configuration is known."""
        if config.pin_protected:
            self._transition(AccessState.PIN_REQUIRED)
        else:
            self._transition(AccessState.UNLOCKED)
        return self._state

    def ensure_unlocked(self) -> None:
        if self._state is AccessState.LOADING:
            raise AccessDeniedError("Still connecting to server")
        if self._state is not AccessState.UNLOCKED:
            raise AccessDeniedError("PIN verification required")

    async def verify_pin(self, pin: str) -> bool:
        """
        Submit a candidate PIN.

        Args:
            pin: Candidate PIN as typed by the user

        Returns:
            True if the server accepted the PIN and access is now granted
        """
        notifications = self.context.notifications
        notifications.dismiss_error()
        self.pin_candidate = pin

        if self._state is not AccessState.PIN_REQUIRED:
            notifications.error(
                "Access already granted" if self.pin_verified else "Still connecting to server"
            )
            return False

        if not pin:
            notifications.error("Please enter a PIN")
            return False

        try:
            response = await self.context.client.verify_pin(pin)
            _require_accepted(response, "Invalid PIN")
        except ConnectivityError as e:
            logger.error(f"PIN verification failed: {e}")
            notifications.error("Failed to verify PIN")
            return False
        except AuthError as e:
            logger.info(f"PIN rejected: {e}")
            notifications.error(str(e))
            return False

        self._transition(AccessState.UNLOCKED)
        self.pin_candidate = None
        return True

    async def admin_login(self, username: str, password: str) -> bool:
        """
        Authenticate as admin.

        Returns:
            True if the server opened an admin session
        """
        notifications = self.context.notifications
        notifications.dismiss_error()

        if not username or not password:
            notifications.error("Please enter username and password")
            return False

        logger.info(f"Attempting admin login: {username}")
        try:
            response = await self.context.client.admin_login(username, password)
            _require_accepted(response, "Invalid credentials")
        except ConnectivityError as e:
            logger.error(f"Admin login failed: {e}")
            notifications.error("Failed to authenticate")
            return False
        except AuthError as e:
            logger.info(f"Admin login rejected: {username}")
            notifications.error(str(e))
            return False

        self._admin = AdminState.AUTHENTICATED
        self.admin_login_required = False
        logger.info(f"Admin login successful: {username}")
        notifications.success("Admin authenticated successfully")
        return True

    async def admin_logout(self) -> None:
        """End the admin session; the local flag is cleared even if the server call fails."""
        try:
            response = await self.context.client.admin_logout()
            if not response.is_success:
                logger.warning(f"Server rejected logout [status={response.status_code}]")
        except ConnectivityError as e:
            logger.warning(f"Logout request failed: {e}")

        self._admin = AdminState.ANONYMOUS
        self.context.notifications.success("Logged out successfully")

    def open_admin_login(self) -> None:
        self.admin_login_required = True

    def cancel_admin_login(self) -> None:
        self.admin_login_required = False

    def pin_expired(self) -> None:
        """A 401 on the listing: the server no longer honours our PIN session."""
        logger.info("File listing returned 401, PIN verification required again")
        self._transition(AccessState.PIN_REQUIRED)

    def admin_required(self) -> None:
        """A 401 on a privileged call: ask for admin credentials."""
        self._admin = AdminState.ANONYMOUS
        self.admin_login_required = True

    def reset(self) -> AccessState:
        """Drop all cached session state and return to the post-config state."""
        config = self.context.server_config
        if config is None:
            self._state = AccessState.LOADING
        elif config.pin_protected:
            self._state = AccessState.PIN_REQUIRED
        else:
            self._state = AccessState.UNLOCKED
        self._admin = AdminState.ANONYMOUS
        self.admin_login_required = False
        self.pin_candidate = None
        logger.info(f"Session reset: access={self._state.value}")
        return self._state
