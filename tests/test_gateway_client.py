"""Unit tests for GatewayClient."""

import hashlib
import json

import httpx
import pytest

from cli.gateway_client import GatewayClient

RECORD = {
    'id': 'report_pdf',
    'name': 'report.pdf',
    'version': 1,
    'size': 5,
    'create_time': 1700000000,
    'modify_time': 1700000100,
    'creator_id': 'system',
    'modifier_id': 'system',
}

PAYLOAD = b'hello'


def make_client(config, handler):
    client = GatewayClient(config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    return client


@pytest.fixture
def recorded():
    """Requests seen by the mock gateway."""
    return []


@pytest.fixture
def mock_gateway(recorded):
    """Mock transport handler that behaves like a healthy gateway."""
    def handler(request):
        recorded.append(request)
        path = request.url.path

        if path == '/v3/3rd/files/report_pdf':
            return httpx.Response(200, json={'code': 0, 'data': RECORD})
        elif path == '/v3/3rd/files/report_pdf/permission':
            return httpx.Response(200, json={'code': 0, 'data': {
                'user_id': 'system', 'read': 1, 'update': 0, 'download': 1, 'rename': 1,
                'history': 1, 'copy': 1, 'print': 1, 'saveas': 1, 'comment': 1,
            }})
        elif path == '/v3/3rd/users':
            ids = [i for i in request.url.params.get('user_ids', '').split(',') if i]
            return httpx.Response(200, json={'code': 0, 'data': [
                {'id': i, 'name': 'System' if i == 'system' else i, 'avatar_url': ''} for i in ids
            ]})
        elif path == '/v3/3rd/files/report_pdf/upload/prepare':
            return httpx.Response(200, json={'code': 0, 'data': {'digest_types': ['md5']}})
        elif path == '/v3/3rd/files/report_pdf/upload/address':
            return httpx.Response(200, json={'code': 0, 'data': {
                'file_id': 'report_pdf',
                'method': 'PUT',
                'url': 'http://test/v3/3rd/files/report_pdf/upload/storage?ticket=abc',
                'headers': {},
                'params': {},
                'send_back_params': {'source': 'file-gateway', 'ticket': 'abc'},
            }})
        elif path == '/v3/3rd/files/report_pdf/upload/storage':
            return httpx.Response(200)
        elif path == '/v3/3rd/files/report_pdf/upload/complete':
            return httpx.Response(200, json={'code': 0, 'data': RECORD})
        elif path == '/v3/3rd/files/report_pdf/download':
            return httpx.Response(200, json={'code': 0, 'data': {
                'url': 'http://test/public/report.pdf',
                'digest': hashlib.md5(PAYLOAD).hexdigest(),
                'digest_type': 'md5',
                'headers': {},
            }})
        elif path == '/public/report.pdf':
            return httpx.Response(200, content=PAYLOAD)

        return httpx.Response(200, json={'code': 40004, 'message': 'File not found'})

    return handler


@pytest.fixture
def client_with_mock(temp_config, mock_gateway):
    """Create GatewayClient with mocked HTTP transport."""
    return make_client(temp_config, mock_gateway)


def test_info_success(client_with_mock):
    result = client_with_mock.info('report_pdf')

    assert result.startswith('report.pdf (ID: report_pdf)')
    assert 'Size: 5 B' in result
    assert 'by system' in result


def test_info_not_found(client_with_mock):
    assert client_with_mock.info('missing') == 'Error: File not found on gateway.'


def test_file_id_is_percent_encoded(client_with_mock, recorded):
    client_with_mock.info('my report/v1.pdf')

    assert recorded[-1].url.raw_path == b'/v3/3rd/files/my%20report%2Fv1.pdf'


def test_permission_lists_granted_and_denied(client_with_mock):
    result = client_with_mock.permission('report_pdf')

    assert 'Permissions of system on report_pdf' in result
    assert 'read' in result.splitlines()[1]
    assert result.splitlines()[2] == '  Denied: update'


def test_users(client_with_mock):
    result = client_with_mock.users(['system', 'alice'])

    assert result.splitlines() == ['  - System (ID: system)', '  - alice (ID: alice)']


def test_users_empty(client_with_mock):
    assert client_with_mock.users([]) == 'No users found.'


def test_upload_runs_full_handshake(client_with_mock, recorded, tmp_path):
    local = tmp_path / 'report.pdf'
    local.write_bytes(PAYLOAD)

    result = client_with_mock.upload(str(local), 'report_pdf')

    assert result == 'Uploaded: report.pdf (ID: report_pdf, Size: 5 B)'
    assert [(r.method, r.url.path.rsplit('/', 1)[-1]) for r in recorded] == [
        ('GET', 'prepare'),
        ('POST', 'address'),
        ('PUT', 'storage'),
        ('POST', 'complete'),
    ]

    put = recorded[2]
    assert put.url.params['ticket'] == 'abc'
    assert put.read() == PAYLOAD
    assert json.loads(recorded[3].content) == {'request': {'name': 'report.pdf'}}


def test_upload_missing_local_file(client_with_mock, recorded):
    result = client_with_mock.upload('/nonexistent/file.txt')

    assert result == 'Error: File not found: /nonexistent/file.txt'
    assert recorded == []


def test_upload_rejected_ticket(temp_config, mock_gateway, tmp_path):
    def handler(request):
        if request.url.path.endswith('/upload/storage'):
            return httpx.Response(403, json={'code': 40003, 'message': 'Unknown upload ticket'})
        return mock_gateway(request)

    local = tmp_path / 'report.pdf'
    local.write_bytes(PAYLOAD)

    result = make_client(temp_config, handler).upload(str(local), 'report_pdf')

    assert result.startswith(f'Error uploading {local}')
    assert 'Upload ticket rejected' in result


def test_download_verifies_digest(client_with_mock, tmp_path):
    result = client_with_mock.download('report_pdf', str(tmp_path))

    assert (tmp_path / 'report.pdf').read_bytes() == PAYLOAD
    assert result.startswith('Downloaded: report.pdf')
    assert 'md5 verified' in result
    assert not list(tmp_path.glob('*.part'))


def test_download_digest_mismatch(temp_config, mock_gateway, tmp_path):
    out = tmp_path / 'out'
    out.mkdir()

    def handler(request):
        if request.url.path == '/public/report.pdf':
            return httpx.Response(200, content=b'tampered')
        return mock_gateway(request)

    result = make_client(temp_config, handler).download('report_pdf', str(out))

    assert result == 'Error downloading report_pdf: md5 digest mismatch'
    assert list(out.iterdir()) == []


def test_download_not_found(client_with_mock, tmp_path):
    assert client_with_mock.download('missing', str(tmp_path)) == 'Error: File not found on gateway.'


def download_url_handler(mock_gateway, url):
    """Mock gateway whose download info points at url."""
    def handler(request):
        if request.url.path == '/v3/3rd/files/report_pdf/download':
            return httpx.Response(200, json={'code': 0, 'data': {
                'url': url,
                'digest': hashlib.md5(PAYLOAD).hexdigest(),
                'digest_type': 'md5',
                'headers': {},
            }})
        if request.url.path.startswith('/public/'):
            return httpx.Response(200, content=PAYLOAD)
        return mock_gateway(request)

    return handler


def test_download_name_cannot_leave_output_dir(temp_config, mock_gateway, tmp_path):
    out = tmp_path / 'a' / 'b' / 'downloads'
    out.mkdir(parents=True)
    handler = download_url_handler(mock_gateway, 'http://test/public/..%2F..%2Fescaped.txt')

    result = make_client(temp_config, handler).download('report_pdf', str(out))

    assert result.startswith('Downloaded: escaped.txt')
    assert [p.name for p in out.iterdir()] == ['escaped.txt']
    assert not (tmp_path / 'a' / 'escaped.txt').exists()


def test_download_name_falls_back_to_file_id(temp_config, mock_gateway, tmp_path):
    handler = download_url_handler(mock_gateway, 'http://test/public/%2E%2E')

    result = make_client(temp_config, handler).download('report_pdf', str(tmp_path))

    assert result.startswith('Downloaded: report_pdf')
    assert (tmp_path / 'report_pdf').read_bytes() == PAYLOAD


def test_retries_server_errors(temp_config, monkeypatch):
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={'code': 0, 'data': RECORD})

    monkeypatch.setattr('cli.gateway_client.time.sleep', lambda seconds: None)
    temp_config.data['max_retries'] = 3

    result = make_client(temp_config, handler).info('report_pdf')

    assert len(attempts) == 3
    assert result.startswith('report.pdf')


def test_connection_failure(temp_config):
    def handler(request):
        raise httpx.ConnectError('connection refused', request=request)

    result = make_client(temp_config, handler).info('report_pdf')

    assert result == 'Error: Cannot connect to file gateway. Is it running?'


def test_sets_request_id_header(client_with_mock, recorded):
    client_with_mock.info('report_pdf')

    assert recorded[-1].headers['X-Request-ID'] == client_with_mock.request_id
