import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pearch.core.detector import DEFAULT_HEADER_SIZE
from pearch.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path("config/config.yaml")
CONFIG_ENV_VAR = "PEARCH_CONFIG"

DEFAULTS = {
    "scan": {
        "header_size": DEFAULT_HEADER_SIZE,
        "continue_on_invalid": False,
        "workers": 4,
        "recursive": True,
        "extensions": [],
    },
    "modules": {
        "hash_calculator": True,
        "pefile_check": False,
    },
    "database": {
        "enabled": False,
        "path": "pe_arch.db",
    },
}

logger = logging.getLogger(__name__)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(cfg: Dict[str, Any]) -> None:
    scan = cfg.get("scan", {})
    header_size = scan.get("header_size")
    if isinstance(header_size, bool) or not isinstance(header_size, int) or header_size <= 0:
        raise ConfigError(f"scan.header_size trebuie sa fie un intreg pozitiv: {header_size!r}")
    if header_size > DEFAULT_HEADER_SIZE:
        raise ConfigError(
            f"scan.header_size nu poate depasi {DEFAULT_HEADER_SIZE} octeti: {header_size}"
        )
    workers = scan.get("workers")
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ConfigError(f"scan.workers trebuie sa fie >= 1: {workers!r}")
    if not isinstance(scan.get("extensions", []), list):
        raise ConfigError("scan.extensions trebuie sa fie o lista")


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Union[str, Path]] = None, strict: bool = False) -> Dict[str, Any]:
    """
    Load YAML config merged over DEFAULTS.
    Missing or invalid files fall back to defaults unless strict is set.
    """
    config_path = resolve_config_path(path)
    try:
        data: Any = {}
        if config_path.exists():
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        elif strict:
            raise ConfigError(f"Fisier config inexistent: {config_path}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config invalid (se astepta un dictionar): {config_path}")
        cfg = _merge(DEFAULTS, data)
        _validate(cfg)
        return cfg
    except (ConfigError, yaml.YAMLError, OSError) as exc:
        if strict:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"Eroare incarcare config {config_path}: {exc}") from exc
        logger.warning("Config ignorat (%s), se folosesc valorile implicite", exc)
        return copy.deepcopy(DEFAULTS)
