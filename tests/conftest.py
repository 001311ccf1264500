"""Shared pytest fixtures for all tests."""

import json
import re
from datetime import datetime, timezone

import httpx
import pytest

from localshare.app import LocalShareApp
from localshare.config import Config

FILENAME_PATTERN = re.compile(rb'filename="([^"]+)"')


class FakeShareServer:
    """
    In-memory stand-in for the LocalShare server API.

    Session state lives on the fake itself, mirroring the cookie session
    the real server keeps. Individual routes can be overridden through
    `overrides`, keyed by (method, path), with an httpx.Response or a
    callable taking the request.
    """

    def __init__(self, pin=None, admin_required=False, max_file_size=1024 * 1024):
        self.pin = pin
        self.admin_required = admin_required
        self.max_file_size = max_file_size
        self.admin_user = 'admin'
        self.admin_pass = 'secret123'
        self.pin_ok = False
        self.admin_ok = False
        self.offline = False
        self.files: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.overrides: dict = {}

    def add_file(self, name: str, content: bytes = b'content') -> None:
        self.files[name] = content

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    def listing(self) -> dict:
        modified = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc).isoformat()
        return {
            'files': [
                {'name': name, 'size': len(content), 'modifiedTime': modified, 'isDir': False}
                for name, content in self.files.items()
            ]
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))

        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)

        override = self.overrides.get((method, path))
        if override is not None:
            return override(request) if callable(override) else override

        if path == '/api/config' and method == 'GET':
            return httpx.Response(200, json={
                'pinProtected': self.pin is not None,
                'adminRequired': self.admin_required,
                'maxFileSize': self.max_file_size,
            })

        if path == '/api/verify-pin' and method == 'POST':
            if json.loads(request.content).get('pin') == self.pin:
                self.pin_ok = True
                return httpx.Response(200, json={'success': True, 'message': 'PIN verified successfully'})
            return httpx.Response(401, json={'error': 'Invalid PIN'})

        if path == '/api/admin/login' and method == 'POST':
            body = json.loads(request.content)
            if body.get('username') == self.admin_user and body.get('password') == self.admin_pass:
                self.admin_ok = True
                return httpx.Response(200, json={'success': True})
            return httpx.Response(401, json={'error': 'Invalid credentials'})

        if path == '/api/admin/logout' and method == 'POST':
            self.admin_ok = False
            return httpx.Response(200, json={'success': True})

        if not path.startswith('/api/files'):
            return httpx.Response(404, json={'error': 'Not found'})

        if self.pin is not None and not self.pin_ok:
            return httpx.Response(401, json={'error': 'PIN verification required'})

        if path == '/api/files' and method == 'GET':
            return httpx.Response(200, json=self.listing())

        if path.startswith('/api/files/download/') and method == 'GET':
            name = path[len('/api/files/download/'):]
            if name not in self.files:
                return httpx.Response(404, json={'error': 'File not found'})
            return httpx.Response(200, content=self.files[name])

        if self.admin_required and not self.admin_ok:
            return httpx.Response(401, json={'error': 'Admin authentication required'})

        if path == '/api/files/upload' and method == 'POST':
            content = request.content
            match = FILENAME_PATTERN.search(content)
            if match is None:
                return httpx.Response(400, json={'error': 'No file provided'})
            name = match.group(1).decode()
            self.files[name] = content
            return httpx.Response(200, json={'message': 'File uploaded successfully', 'filename': name})

        if method == 'DELETE':
            name = path[len('/api/files/'):]
            if name not in self.files:
                return httpx.Response(404, json={'error': 'File not found'})
            del self.files[name]
            return httpx.Response(200, json={'success': True, 'message': 'File deleted successfully'})

        return httpx.Response(404, json={'error': 'Not found'})


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .localshare directory
    """
    config_dir = tmp_path / '.localshare'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, tmp_path):
    """
    Create temporary config instance with a short notification lifetime.

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['download_dir'] = str(tmp_path / 'downloads')
    config.data['notification_ttl'] = 0.2
    return config


@pytest.fixture
def fake_server():
    """Open server: no PIN, no admin."""
    return FakeShareServer()


@pytest.fixture
def make_app(temp_config):
    """Build a LocalShareApp talking to the given fake server."""
    def factory(server: FakeShareServer) -> LocalShareApp:
        return LocalShareApp(temp_config, transport=httpx.MockTransport(server.handle))

    return factory


@pytest.fixture
def app(make_app, fake_server):
    return make_app(fake_server)


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a small sample file for uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'notes.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def large_file(tmp_path):
    """
    Create a 2 MiB file.

    Returns:
        Path to the file
    """
    file_path = tmp_path / 'big.bin'
    file_path.write_bytes(b'\0' * (2 * 1024 * 1024))
    return file_path


@pytest.fixture
def pin_server():
    """Server with PIN 1234 and no admin requirement."""
    return FakeShareServer(pin='1234')


@pytest.fixture
def locked_server():
    """Server with PIN 1234, admin required and a 1 MiB limit."""
    return FakeShareServer(pin='1234', admin_required=True, max_file_size=1048576)


@pytest.fixture
def swap_transport():
    """Point an app at another transport, closing the HTTP client it replaces."""
    async def swap(app: LocalShareApp, transport: httpx.AsyncBaseTransport) -> None:
        old = app.context.client.session
        app.context.client.session = httpx.AsyncClient(transport=transport, base_url=old.base_url)
        await old.aclose()

    return swap
