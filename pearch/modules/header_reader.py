from pathlib import Path

from pearch.core.analyzer import ScanModule, ScanResult
from pearch.core.detector import DEFAULT_HEADER_SIZE
from pearch.core.reader import read_header


class HeaderReader(ScanModule):
    """
    Modul care citeste primii octeti din fisier (implicit 4096)
    pentru detectia arhitecturii.
    """

    def __init__(self, header_size: int = DEFAULT_HEADER_SIZE):
        super().__init__("header_reader")
        self.header_size = header_size

    def analyze(self, file_path: Path, result: ScanResult) -> None:
        result.header = read_header(file_path, self.header_size)
        result.header_size = len(result.header)
        self.logger.debug(f"Cititi {result.header_size} octeti din {file_path.name}")
