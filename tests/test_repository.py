import pytest

from pearch.database.repository import ScanRepository


@pytest.fixture
def repo(tmp_path):
    r = ScanRepository(tmp_path / 'history.db')
    yield r
    r.close()


def test_save_and_list(repo, scanner, sample_files):
    results = scanner.scan_batch([str(sample_files[k]) for k in ('x64', 'text', 'broken')])
    ids = [repo.save_scan(r) for r in results]
    assert len(set(ids)) == 3
    assert repo.count() == 3

    recognized = repo.list_scans(status='recognized')
    assert len(recognized) == 1
    assert recognized[0].architecture == 'x64 (64-bit)'
    assert recognized[0].machine_type == 0x8664
    assert recognized[0].file_name == 'app.exe'
    assert recognized[0].sha256 == results[0].file_hash['sha256']

    invalid = repo.list_scans(status='invalid')
    assert invalid[0].reason == 'PE signature mismatch'
    assert invalid[0].architecture is None

    assert len(repo.list_scans(limit=2)) == 2


def test_error_results_are_stored(repo, scanner, tmp_path):
    (result,) = scanner.scan_batch([str(tmp_path / 'missing.exe')])
    repo.save_scan(result)
    (record,) = repo.list_scans()
    assert record.status == 'error'
    assert 'Fisierul nu exista' in record.errors


def test_status_counts(repo, scanner, sample_files, tmp_path):
    assert repo.status_counts() == {'recognized': 0, 'not_recognized': 0, 'invalid': 0, 'error': 0}
    paths = [str(sample_files[k]) for k in ('x64', 'x86', 'text', 'broken')] + [str(tmp_path / 'missing.exe')]
    for result in scanner.scan_batch(paths):
        repo.save_scan(result)
    assert repo.status_counts() == {'recognized': 2, 'not_recognized': 1, 'invalid': 1, 'error': 1}
