from watchdog.events import DirCreatedEvent, FileCreatedEvent, FileModifiedEvent

from pearch.watch.watcher import ScanHandler


def test_handler_scans_new_files(scanner, sample_files):
    seen = []
    handler = ScanHandler(scanner, on_result=seen.append)
    handler.on_created(FileCreatedEvent(str(sample_files['x64'])))
    handler.on_modified(FileModifiedEvent(str(sample_files['text'])))
    assert [r.status for r in seen] == ['recognized', 'not_recognized']


def test_handler_ignores_directories_and_vanished_files(scanner, tmp_path):
    seen = []
    handler = ScanHandler(scanner, on_result=seen.append)
    handler.on_created(DirCreatedEvent(str(tmp_path)))
    handler.on_created(FileCreatedEvent(str(tmp_path / 'gone.exe')))
    assert seen == []


def test_handler_logs_scan_failures(scanner, sample_files, monkeypatch):
    def boom(path):
        raise RuntimeError('boom')

    seen = []
    monkeypatch.setattr(scanner, 'scan_file', boom)
    ScanHandler(scanner, on_result=seen.append).scan(str(sample_files['x64']))
    assert seen == []
