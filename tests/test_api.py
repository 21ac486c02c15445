import pytest
from fastapi.testclient import TestClient

from api import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('PEARCH_CONFIG', raising=False)
    return TestClient(app)


def test_status(client):
    assert client.get('/status').json() == {'status': 'ok'}


def test_machine_types(client):
    data = client.get('/machine-types').json()
    assert data['0x8664'] == 'x64 (64-bit)'
    assert len(data) == 18


def test_detect_upload(client, make_pe):
    payload = make_pe(0x01C0) + b'\xcc' * 8192
    resp = client.post('/detect', files={'file': ('arm.dll', payload, 'application/octet-stream')})
    assert resp.status_code == 200
    data = resp.json()
    assert data['status'] == 'recognized'
    assert data['architecture'] == 'ARM'
    assert data['header_size'] == 4096


def test_detect_upload_not_pe(client):
    resp = client.post('/detect', files={'file': ('notes.txt', b'hello', 'text/plain')})
    assert resp.json()['status'] == 'not_recognized'


def test_detect_path(client, sample_files, tmp_path):
    resp = client.post('/detect-path', data={'path': str(sample_files['broken'])})
    assert resp.status_code == 200
    assert resp.json()['detection'] == {'status': 'invalid', 'reason': 'PE signature mismatch'}

    assert client.post('/detect-path', data={'path': str(tmp_path / 'missing')}).status_code == 400


def test_scan_dir(client, sample_files, tmp_path):
    resp = client.post('/scan-dir', data={'path': str(tmp_path), 'recursive': 'false'})
    assert resp.status_code == 200
    assert resp.json()['count'] == 3

    assert client.post('/scan-dir', data={'path': str(sample_files['x64'])}).status_code == 400
