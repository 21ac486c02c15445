import csv
from typing import Any, Dict, Iterable, List

from pearch.core.analyzer import ScanResult
from pearch.core.detector import Invalid, Recognized

COLUMNS = [
    "file_path",
    "status",
    "architecture",
    "machine_type",
    "reason",
    "sha256",
    "size",
    "errors",
]


def row(result: ScanResult) -> Dict[str, Any]:
    """Flat representation of a result, one column per report field."""
    detection = result.detection
    return {
        "file_path": result.file_path,
        "status": result.status,
        "architecture": detection.architecture_name if isinstance(detection, Recognized) else "",
        "machine_type": f"0x{detection.machine_type:04X}" if isinstance(detection, Recognized) else "",
        "reason": detection.reason if isinstance(detection, Invalid) else "",
        "sha256": result.file_hash.get("sha256", ""),
        "size": result.file_hash.get("size", ""),
        "errors": "; ".join(result.errors),
    }


def rows(results: Iterable[ScanResult]) -> List[Dict[str, Any]]:
    return [row(r) for r in results]


def generate(results: Iterable[ScanResult], path: str):
    """
    Exporta rezultatele in CSV, un rand per fisier.
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=COLUMNS)
        writer.writeheader()
        writer.writerows(rows(results))
