import json
from pathlib import Path
from typing import Iterable, Union

from pearch.core.analyzer import ScanResult


def generate(results: Union[ScanResult, Iterable[ScanResult]], path: str):
    """
    Salveaza rezultatele scanarii in JSON.
    """
    if isinstance(results, ScanResult):
        payload = results.to_dict()
    else:
        payload = [r.to_dict() for r in results]
    Path(path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False),
        encoding="utf-8"
    )
