from pathlib import Path

from pearch.core.analyzer import ScanModule, ScanResult
from pearch.core.detector import Recognized, detect_architecture
from pearch.core.exceptions import ModuleError


class ArchitectureDetector(ScanModule):
    """
    Detectie arhitectura tinta din header-ul PE
    Rezultat: Recognized / NotRecognized / Invalid
    """

    def __init__(self, continue_on_invalid: bool = False):
        super().__init__("architecture")
        self.continue_on_invalid = continue_on_invalid

    def analyze(self, file_path: Path, result: ScanResult) -> None:
        if result.header is None:
            raise ModuleError("Header-ul nu a fost citit")

        result.detection = detect_architecture(
            result.header, continue_on_invalid=self.continue_on_invalid
        )
        if isinstance(result.detection, Recognized):
            self.logger.info(
                f"{file_path.name}: {result.detection.architecture_name} "
                f"(0x{result.detection.machine_type:04X})"
            )
        else:
            self.logger.debug(f"{file_path.name}: {result.detection.status}")
