"""Tests for FileRegistry refresh semantics."""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from localshare.access import AccessState, AdminState


@pytest.mark.asyncio
async def test_refresh_replaces_listing_in_server_order(app, fake_server):
    fake_server.add_file('zeta.txt')
    fake_server.add_file('alpha.txt')
    await app.start()

    assert app.registry.names() == ['zeta.txt', 'alpha.txt']
    entry = app.registry.get('alpha.txt')
    assert entry.size == len(b'content')
    assert entry.modified_time == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    del fake_server.files['zeta.txt']
    assert await app.refresh() is True
    assert app.registry.names() == ['alpha.txt']


@pytest.mark.asyncio
async def test_missing_files_field_means_empty(app, fake_server):
    fake_server.add_file('a.txt')
    await app.start()
    fake_server.overrides[('GET', '/api/files')] = httpx.Response(200, json={})

    assert await app.refresh() is True
    assert app.registry.files == ()


@pytest.mark.asyncio
async def test_null_files_field_means_empty(app, fake_server):
    await app.start()
    fake_server.overrides[('GET', '/api/files')] = httpx.Response(200, json={'files': None})

    assert await app.refresh() is True
    assert app.registry.files == ()


@pytest.mark.asyncio
async def test_success_clears_existing_error(app, fake_server):
    await app.start()
    app.notifications.error('Something earlier')

    await app.refresh()

    assert app.notifications.current_error is None


@pytest.mark.asyncio
async def test_failure_keeps_previous_listing(app, fake_server):
    fake_server.add_file('keep.txt')
    await app.start()
    fake_server.overrides[('GET', '/api/files')] = httpx.Response(500, json={'error': 'disk gone'})

    assert await app.refresh() is False
    assert app.registry.names() == ['keep.txt']
    assert app.notifications.current_error.message == 'Failed to fetch files'
    assert app.access.state is AccessState.UNLOCKED


@pytest.mark.asyncio
async def test_network_failure_keeps_previous_listing(app, fake_server):
    fake_server.add_file('keep.txt')
    await app.start()
    fake_server.offline = True

    assert await app.refresh() is False
    assert app.registry.names() == ['keep.txt']
    assert app.notifications.current_error.message == 'Failed to fetch files'


@pytest.mark.asyncio
async def test_malformed_listing_is_an_error(app, fake_server):
    fake_server.add_file('keep.txt')
    await app.start()
    fake_server.overrides[('GET', '/api/files')] = httpx.Response(200, json={'files': [{'name': 'x'}]})

    assert await app.refresh() is False
    assert app.registry.names() == ['keep.txt']


@pytest.mark.asyncio
async def test_401_demotes_pin_but_not_admin(make_app, locked_server):
    locked_server.add_file('secret.pdf')
    app = make_app(locked_server)
    await app.start()
    await app.verify_pin('1234')
    await app.admin_login('admin', 'secret123')

    # Server-side session expiry.
    locked_server.pin_ok = False
    assert await app.refresh() is False

    assert app.access.state is AccessState.PIN_REQUIRED
    assert app.access.admin is AdminState.AUTHENTICATED
    assert app.registry.names() == ['secret.pdf']


@pytest.mark.asyncio
async def test_refresh_refused_while_locked(make_app, pin_server):
    app = make_app(pin_server)
    await app.start()

    assert await app.refresh() is False
    assert pin_server.count('GET', '/api/files') == 0


@pytest.mark.asyncio
async def test_stale_response_never_overwrites_newer_listing(app, fake_server, swap_transport):
    await app.start()
    release_slow = asyncio.Event()
    first_arrived = asyncio.Event()
    responses = iter([
        {'files': [{'name': 'old.txt', 'size': 1, 'modifiedTime': '2024-01-01T00:00:00Z'}]},
        {'files': [{'name': 'new.txt', 'size': 2, 'modifiedTime': '2024-01-02T00:00:00Z'}]},
    ])

    class SlowFirstTransport(httpx.AsyncBaseTransport):
        def __init__(self):
            self.calls = 0

        async def handle_async_request(self, request):
            self.calls += 1
            body = next(responses)
            if self.calls == 1:
                first_arrived.set()
                await release_slow.wait()
            return httpx.Response(200, json=body)

    await swap_transport(app, SlowFirstTransport())

    slow = asyncio.create_task(app.refresh())
    await first_arrived.wait()
    assert app.registry.refreshing

    assert await app.refresh() is True
    assert app.registry.names() == ['new.txt']

    release_slow.set()
    assert await slow is False
    assert app.registry.names() == ['new.txt']
    assert not app.registry.refreshing


@pytest.mark.asyncio
async def test_nanosecond_timestamps_are_accepted(app, fake_server):
    await app.start()
    fake_server.overrides[('GET', '/api/files')] = httpx.Response(200, json={
        'files': [{'name': 'a', 'size': 3, 'modifiedTime': '2024-05-01T10:00:00.123456789+02:00'}]
    })

    assert await app.refresh() is True
    assert app.registry.get('a').modified_time.microsecond == 123456
