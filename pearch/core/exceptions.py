class ScannerError(Exception):
    """Generic error raised by the scanner runtime."""


class ModuleError(ScannerError):
    """Raised when a scan module fails."""


class ConfigError(ScannerError):
    """Raised when config loading/validation fails."""


class HeaderReadError(ScannerError):
    """Raised when the leading bytes of a file cannot be read."""
