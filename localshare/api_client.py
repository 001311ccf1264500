"""Async HTTP client for the LocalShare server API."""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import quote

import httpx

from common.logging_config import get_logger
from localshare.config import Config
from localshare.constants import (
    ADMIN_LOGIN_PATH,
    ADMIN_LOGOUT_PATH,
    CONFIG_PATH,
    DOWNLOAD_PATH,
    FILES_PATH,
    UPLOAD_FIELD,
    UPLOAD_PATH,
    VERIFY_PIN_PATH,
)
from localshare.exceptions import ConnectivityError
from localshare.schemas import AdminLoginRequest, ErrorBody, PinRequest

logger = get_logger(__name__)


def file_segment(filename: str) -> str:
    """Encode a file name as a single opaque path segment."""
    return quote(filename, safe='')


def error_message(response: httpx.Response, fallback: str) -> str:
    """
    Extract the server-provided error message from a failed response.

    Args:
        response: HTTP response object
        fallback: Message used when the body carries no error text

    Returns:
        Error message for the user
    """
    try:
        body = ErrorBody.model_validate(response.json())
    except Exception:
        return fallback
    return body.error or fallback


class ShareApiClient:
    """
    Thin async wrapper around the server's /api endpoints.

    Methods return the raw response so callers can react to specific
    status codes. Session cookies live in the client's cookie jar.
    Transport failures are raised as ConnectivityError; nothing is retried.
    """

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize API client.

        Args:
            config: Configuration instance
            transport: Optional transport override (testing)
        """
        self.config = config
        self.session = httpx.AsyncClient(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            transport=transport,
        )
        self.request_id: Optional[str] = None
        logger.info(f"Initialized ShareApiClient [base_url={config.get_base_url()}]")

    def _tag_request(self, kwargs: dict) -> str:
        request_id = str(uuid.uuid4())
        headers = dict(kwargs.get('headers') or {})
        headers['X-Request-ID'] = request_id
        kwargs['headers'] = headers
        self.request_id = request_id
        return request_id

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: API endpoint path
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectivityError: If the request could not be completed
        """
        request_id = self._tag_request(kwargs)
        logger.debug(f"Making request: {method} {endpoint} [request_id={request_id}]")

        try:
            response = await self.session.request(method, endpoint, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {endpoint} [request_id={request_id}]")
            raise ConnectivityError("Request timed out. Server may be overloaded.") from e
        except httpx.HTTPError as e:
            logger.error(f"Network error: {method} {endpoint} error={type(e).__name__} [request_id={request_id}]")
            raise ConnectivityError("Cannot connect to server. Is it running?") from e

        if response.status_code >= 400:
            logger.warning(
                f"Request failed: {method} {endpoint} status={response.status_code} [request_id={request_id}]"
            )
        else:
            logger.debug(
                f"Response received: {method} {endpoint} status={response.status_code} [request_id={request_id}]"
            )
        return response

    async def get_config(self) -> httpx.Response:
        return await self._request('GET', CONFIG_PATH)

    async def list_files(self) -> httpx.Response:
        return await self._request('GET', FILES_PATH)

    async def verify_pin(self, pin: str) -> httpx.Response:
        return await self._request('POST', VERIFY_PIN_PATH, json=PinRequest(pin=pin).model_dump())

    async def admin_login(self, username: str, password: str) -> httpx.Response:
        body = AdminLoginRequest(username=username, password=password)
        return await self._request('POST', ADMIN_LOGIN_PATH, json=body.model_dump())

    async def admin_logout(self) -> httpx.Response:
        return await self._request('POST', ADMIN_LOGOUT_PATH)

    async def upload(self, filename: str, content: bytes) -> httpx.Response:
        files = {UPLOAD_FIELD: (filename, content, 'application/octet-stream')}
        return await self._request('POST', UPLOAD_PATH, files=files)

    async def delete(self, filename: str) -> httpx.Response:
        return await self._request('DELETE', f"{FILES_PATH}/{file_segment(filename)}")

    @asynccontextmanager
    async def download(self, filename: str) -> AsyncIterator[httpx.Response]:
        """
        Stream a file's content.

        Yields:
            Open streaming response; the body is read inside the context

        Raises:
            ConnectivityError: If the request could not be started
        """
        url = f"{DOWNLOAD_PATH}/{file_segment(filename)}"
        kwargs: dict = {}
        request_id = self._tag_request(kwargs)
        logger.debug(f"Starting download: GET {url} [request_id={request_id}]")

        try:
            async with self.session.stream('GET', url, **kwargs) as response:
                yield response
        except httpx.TimeoutException as e:
            logger.error(f"Download timed out: {url} [request_id={request_id}]")
            raise ConnectivityError("Download timed out.") from e
        except httpx.HTTPError as e:
            logger.error(f"Download failed: {url} error={type(e).__name__} [request_id={request_id}]")
            raise ConnectivityError("Cannot connect to server. Is it running?") from e

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()
