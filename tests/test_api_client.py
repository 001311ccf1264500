"""Unit tests for ShareApiClient."""

import json

import httpx
import pytest

from localshare.api_client import ShareApiClient, error_message, file_segment
from localshare.exceptions import ConnectivityError


def make_client(temp_config, handler) -> ShareApiClient:
    return ShareApiClient(temp_config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_requests_carry_request_id(temp_config):
    seen = []

    def handler(request):
        seen.append(request.headers.get('X-Request-ID'))
        return httpx.Response(200, json={'pinProtected': False, 'adminRequired': False, 'maxFileSize': 1})

    client = make_client(temp_config, handler)
    await client.get_config()
    await client.get_config()

    assert all(seen)
    assert seen[0] != seen[1]
    assert client.request_id == seen[1]
    await client.close()


@pytest.mark.asyncio
async def test_verify_pin_posts_json_body(temp_config):
    captured = {}

    def handler(request):
        captured['path'] = request.url.path
        captured['body'] = json.loads(request.content)
        return httpx.Response(200, json={'success': True})

    client = make_client(temp_config, handler)
    response = await client.verify_pin('1234')

    assert response.status_code == 200
    assert captured == {'path': '/api/verify-pin', 'body': {'pin': '1234'}}
    await client.close()


@pytest.mark.asyncio
async def test_admin_login_posts_credentials(temp_config):
    captured = {}

    def handler(request):
        captured['body'] = json.loads(request.content)
        return httpx.Response(401, json={'error': 'Invalid credentials'})

    client = make_client(temp_config, handler)
    response = await client.admin_login('admin', 'hunter22')

    assert response.status_code == 401
    assert captured['body'] == {'username': 'admin', 'password': 'hunter22'}
    await client.close()


@pytest.mark.asyncio
async def test_upload_sends_multipart_file_field(temp_config):
    captured = {}

    def handler(request):
        captured['content_type'] = request.headers['Content-Type']
        captured['body'] = request.content
        return httpx.Response(200, json={'message': 'ok', 'filename': 'a.txt'})

    client = make_client(temp_config, handler)
    await client.upload('a.txt', b'hello')

    assert captured['content_type'].startswith('multipart/form-data')
    assert b'name="file"' in captured['body']
    assert b'filename="a.txt"' in captured['body']
    assert b'hello' in captured['body']
    await client.close()


@pytest.mark.asyncio
async def test_delete_encodes_filename_as_single_segment(temp_config):
    captured = {}

    def handler(request):
        captured['raw_path'] = request.url.raw_path
        return httpx.Response(200, json={'success': True})

    client = make_client(temp_config, handler)
    await client.delete('my report/v2.pdf')

    assert captured['raw_path'] == b'/api/files/my%20report%2Fv2.pdf'
    await client.close()


@pytest.mark.asyncio
async def test_download_streams_body(temp_config):
    def handler(request):
        assert request.url.path == '/api/files/download/photo.jpg'
        return httpx.Response(200, content=b'\x89PNG...')

    client = make_client(temp_config, handler)
    async with client.download('photo.jpg') as response:
        body = await response.aread()

    assert body == b'\x89PNG...'
    await client.close()


@pytest.mark.asyncio
async def test_connection_error_becomes_connectivity_error(temp_config):
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_client(temp_config, handler)

    with pytest.raises(ConnectivityError, match='Cannot connect to server'):
        await client.list_files()
    await client.close()


@pytest.mark.asyncio
async def test_timeout_becomes_connectivity_error(temp_config):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(temp_config, handler)

    with pytest.raises(ConnectivityError, match='timed out'):
        await client.admin_logout()
    await client.close()


@pytest.mark.asyncio
async def test_download_transport_error_becomes_connectivity_error(temp_config):
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_client(temp_config, handler)

    with pytest.raises(ConnectivityError):
        async with client.download('x.bin'):
            pass
    await client.close()


@pytest.mark.asyncio
async def test_no_retry_on_server_error(temp_config):
    call_count = 0

    def handler(request):
        nonlocal call_count
        call_count += 1
        return httpx.Response(500, json={'error': 'boom'})

    client = make_client(temp_config, handler)
    response = await client.list_files()

    assert response.status_code == 500
    assert call_count == 1
    await client.close()


def test_error_message_prefers_server_text():
    response = httpx.Response(400, json={'error': 'File size exceeds maximum of 1 MB'})
    assert error_message(response, 'Failed to upload file') == 'File size exceeds maximum of 1 MB'


def test_error_message_falls_back_without_body():
    assert error_message(httpx.Response(500, text='oops'), 'Failed to upload file') == 'Failed to upload file'
    assert error_message(httpx.Response(400, json={}), 'Failed to delete file') == 'Failed to delete file'


def test_file_segment_escapes_separators():
    assert file_segment('a b/c?.txt') == 'a%20b%2Fc%3F.txt'


@pytest.mark.asyncio
async def test_close_session(temp_config):
    client = make_client(temp_config, lambda request: httpx.Response(200))
    await client.close()
    assert client.session.is_closed
