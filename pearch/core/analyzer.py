"""
Core engine for the PE architecture scanner.
Handles orchestration, plugin registration, and result aggregation.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import json

from pearch.core.config import load_config
from pearch.core.detector import DetectionResult
from pearch.core.exceptions import HeaderReadError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATUSES = ("recognized", "not_recognized", "invalid", "error")


@dataclass
class ScanResult:
    file_path: str
    timestamp: datetime = field(default_factory=datetime.now)

    # Raw header bytes; kept out of serialization
    header: Optional[bytes] = field(default=None, repr=False)
    header_size: int = 0

    detection: Optional[DetectionResult] = None

    # Module outputs
    file_hash: Dict[str, Any] = field(default_factory=dict)
    pe_info: Dict[str, Any] = field(default_factory=dict)
    analysis_log: List[Dict[str, Any]] = field(default_factory=list)

    # Metadata
    scan_duration: float = 0.0
    modules_used: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    io_error: bool = False

    @property
    def status(self) -> str:
        return self.detection.status if self.detection is not None else "error"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "file_path": self.file_path,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status,
            "detection": self.detection.to_dict() if self.detection is not None else None,
            "header_size": self.header_size,
            "file_hash": self.file_hash,
            "pe_info": self.pe_info,
            "analysis_log": self.analysis_log,
            "scan_duration": self.scan_duration,
            "modules_used": self.modules_used,
            "errors": self.errors,
        }


class ScanModule:
    """Base class for scan modules."""

    def __init__(self, name: str):
        self.name = name
        self.enabled = True
        self.logger = logging.getLogger(f"module.{name}")

    def analyze(self, file_path: Path, result: ScanResult) -> None:
        raise NotImplementedError("Modulul trebuie sa implementeze analiza.")

    def get_metadata(self) -> Dict[str, Any]:
        return {"name": self.name, "enabled": self.enabled, "version": "1.0.0"}


class PluginManager:
    """Register and manage scan modules."""

    def __init__(self):
        self.modules: Dict[str, ScanModule] = {}
        self.logger = logging.getLogger("PluginManager")

    def register_module(self, module: ScanModule) -> None:
        if module.name in self.modules:
            self.logger.warning(
                f"Modulul {module.name} este deja inregistrat. Suprascriere."
            )
        self.modules[module.name] = module
        self.logger.debug(f"Modul inregistrat: {module.name}")

    def unregister_module(self, module_name: str) -> None:
        if module_name in self.modules:
            del self.modules[module_name]
            self.logger.info(f"Modul eliminat: {module_name}")

    def get_module(self, module_name: str) -> Optional[ScanModule]:
        return self.modules.get(module_name)

    def list_modules(self) -> List[str]:
        return list(self.modules.keys())

    def enable_module(self, module_name: str) -> None:
        if module := self.modules.get(module_name):
            module.enabled = True
            self.logger.info(f"Modul activat: {module_name}")

    def disable_module(self, module_name: str) -> None:
        if module := self.modules.get(module_name):
            module.enabled = False
            self.logger.info(f"Modul dezactivat: {module_name}")


class ArchitectureScanner:
    """Main orchestrator for PE architecture scans."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or load_config()
        self.plugin_manager = PluginManager()
        self.logger = logging.getLogger("ArchitectureScanner")

        # Stats
        self._stats_lock = threading.Lock()
        self.total_scans = 0
        self.status_counts: Dict[str, int] = {status: 0 for status in STATUSES}

    @property
    def scan_settings(self) -> Dict[str, Any]:
        return self.config.get("scan", {})

    def scan_file(self, file_path: str) -> ScanResult:
        """Run every enabled module on a single file."""
        start_time = datetime.now()
        file_path_obj = Path(file_path)

        if not file_path_obj.exists():
            raise FileNotFoundError(f"Fisierul nu exista: {file_path}")
        if not file_path_obj.is_file():
            raise ValueError(f"Calea specificata nu este fisier: {file_path}")

        self.logger.debug(f"Start scanare: {file_path}")

        result = ScanResult(file_path=str(file_path_obj.absolute()))

        # Execute modules
        for module_name, module in self.plugin_manager.modules.items():
            if not module.enabled:
                self.logger.debug(f"Modul {module_name} dezactivat, skip")
                continue

            try:
                result.analysis_log.append({"module": module_name, "status": "start"})
                module.analyze(file_path_obj, result)
                result.modules_used.append(module_name)
                result.analysis_log.append({"module": module_name, "status": "done"})
            except Exception as e:
                error_msg = f"Eroare in modulul {module_name}: {str(e)}"
                self.logger.error(error_msg)
                result.errors.append(error_msg)
                result.analysis_log.append(
                    {"module": module_name, "status": "error", "detail": str(e)}
                )
                if isinstance(e, (HeaderReadError, OSError)):
                    result.io_error = True

        end_time = datetime.now()
        result.scan_duration = (end_time - start_time).total_seconds()
        self._record(result)

        self.logger.info(
            "Scanare completata in %.3fs: %s -> %s",
            result.scan_duration,
            file_path_obj.name,
            result.status,
        )
        return result

    def _scan_or_error(self, file_path: str) -> ScanResult:
        try:
            return self.scan_file(file_path)
        except Exception as e:
            self.logger.error(f"Eroare scanare {file_path}: {e}")
            error_result = ScanResult(
                file_path=str(file_path), errors=[str(e)], io_error=True
            )
            self._record(error_result)
            return error_result

    def scan_batch(self, file_paths: Iterable[str], workers: Optional[int] = None) -> List[ScanResult]:
        """Scan several files; results keep the input order and failures never abort the batch."""
        paths = [str(p) for p in file_paths]
        workers = workers or self.scan_settings.get("workers", 1)
        if workers <= 1 or len(paths) <= 1:
            return [self._scan_or_error(p) for p in paths]

        with ThreadPoolExecutor(max_workers=workers) as ex:
            return list(ex.map(self._scan_or_error, paths))

    def collect_files(
        self,
        directory: str,
        recursive: Optional[bool] = None,
        extensions: Optional[Iterable[str]] = None,
    ) -> List[Path]:
        directory_path = Path(directory)
        if not directory_path.is_dir():
            raise NotADirectoryError(f"Director invalid: {directory}")

        if recursive is None:
            recursive = self.scan_settings.get("recursive", True)
        if extensions is None:
            extensions = self.scan_settings.get("extensions", [])
        wanted = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}

        candidates = directory_path.rglob("*") if recursive else directory_path.iterdir()
        files = [p for p in candidates if p.is_file()]
        if wanted:
            files = [p for p in files if p.suffix.lower() in wanted]
        return sorted(files)

    def scan_directory(
        self,
        directory: str,
        recursive: Optional[bool] = None,
        extensions: Optional[Iterable[str]] = None,
        workers: Optional[int] = None,
    ) -> List[ScanResult]:
        files = self.collect_files(directory, recursive=recursive, extensions=extensions)
        self.logger.info(f"Scanare {len(files)} fisiere din {directory}")
        return self.scan_batch([str(p) for p in files], workers=workers)

    def _record(self, result: ScanResult) -> None:
        with self._stats_lock:
            self.total_scans += 1
            self.status_counts[result.status] += 1

    def get_statistics(self) -> Dict[str, Any]:
        with self._stats_lock:
            counts = dict(self.status_counts)
            total = self.total_scans
        return {
            "total_scans": total,
            **counts,
            "pe_rate": counts["recognized"] / total * 100 if total > 0 else 0,
            "registered_modules": self.plugin_manager.list_modules(),
        }


if __name__ == "__main__":
    scanner = ArchitectureScanner()
    print("Scanner de arhitectura PE initializat.")
    print(f"Statistici: {json.dumps(scanner.get_statistics(), indent=2)}")
