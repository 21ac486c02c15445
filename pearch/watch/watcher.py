"""
Real-time watcher for new/modified files, based on watchdog.
"""

from pathlib import Path
from typing import Callable, List, Optional
import logging

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger("watcher")


class ScanHandler(FileSystemEventHandler):
    """Scans every created or modified file and hands the result to on_result."""

    def __init__(self, scanner, on_result: Optional[Callable] = None):
        super().__init__()
        self.scanner = scanner
        self.on_result = on_result

    def on_created(self, event):
        if event.is_directory:
            return
        self.scan(event.src_path)

    def on_modified(self, event):
        if event.is_directory:
            return
        self.scan(event.src_path)

    def scan(self, path: str):
        if not Path(path).is_file():
            return
        try:
            res = self.scanner.scan_file(path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Eroare scanare %s: %s", path, exc)
            return
        if self.on_result:
            self.on_result(res)


def start_watch(
    paths: List[str],
    scanner,
    recursive: bool = True,
    on_result: Optional[Callable] = None,
):
    """
    Porneste monitorizarea si blocheaza thread-ul curent (observer.join()).
    """
    observer = start_watch_async(paths, scanner, recursive=recursive, on_result=on_result)
    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        pass
    finally:
        stop_watch(observer)


def start_watch_async(
    paths: List[str],
    scanner,
    recursive: bool = True,
    on_result: Optional[Callable] = None,
):
    """
    Porneste monitorizarea fara sa blocheze thread-ul curent. Returneaza Observer-ul.
    """
    observer = Observer()
    handler = ScanHandler(scanner, on_result)
    for p in paths:
        observer.schedule(handler, path=str(Path(p)), recursive=recursive)
    observer.start()
    logger.info("Watcher pornit pe %s", ", ".join(str(p) for p in paths))
    return observer


def stop_watch(observer):
    """Opreste un observer returnat de start_watch_async."""
    observer.stop()
    observer.join(timeout=5)
