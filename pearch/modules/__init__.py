from typing import Any, Dict, Optional

from pearch.core.detector import DEFAULT_HEADER_SIZE
from .header_reader import HeaderReader
from .architecture import ArchitectureDetector
from .hash_calculator import HashCalculator
from .pefile_check import PefileCheck

DISABLED_BY_DEFAULT = {"pefile_check"}


def create_default_modules(config: Optional[Dict[str, Any]] = None):
    """Creeaza si returneaza modulele default, in ordinea de executie"""
    config = config or {}
    scan_cfg = config.get("scan", {})
    modules_cfg = config.get("modules", {})

    modules = [
        HeaderReader(scan_cfg.get("header_size", DEFAULT_HEADER_SIZE)),
        ArchitectureDetector(scan_cfg.get("continue_on_invalid", False)),
        HashCalculator(),
        PefileCheck(),
    ]
    for module in modules:
        module.enabled = modules_cfg.get(module.name, module.name not in DISABLED_BY_DEFAULT)
    return modules
