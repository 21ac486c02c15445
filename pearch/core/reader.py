"""
Reads the leading bytes of a candidate file for header detection.
"""

from pathlib import Path
from typing import Union

from pearch.core.detector import DEFAULT_HEADER_SIZE
from pearch.core.exceptions import HeaderReadError


def read_header(path: Union[str, Path], size: int = DEFAULT_HEADER_SIZE) -> bytes:
    """
    Return at most `size` bytes from the start of the file.
    Short files yield fewer bytes; that is not an error.
    The detector works on the first DEFAULT_HEADER_SIZE bytes at most.
    """
    if size <= 0 or size > DEFAULT_HEADER_SIZE:
        raise ValueError(f"Dimensiune header invalida: {size}")

    file_path = Path(path)
    try:
        with open(file_path, "rb") as f:
            return f.read(size)
    except OSError as exc:
        raise HeaderReadError(f"Nu se poate citi {file_path}: {exc}") from exc
