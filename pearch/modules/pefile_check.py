from pathlib import Path

from pearch.core.analyzer import ScanModule, ScanResult
from pearch.core.detector import Recognized, machine_name
import pefile


class PefileCheck(ScanModule):
    """
    Verificare incrucisata a campului Machine folosind pefile.
    Nu modifica rezultatul detectiei; noteaza doar diferentele in pe_info.
    """

    def __init__(self):
        super().__init__("pefile_check")

    def analyze(self, file_path: Path, result: ScanResult) -> None:
        if not isinstance(result.detection, Recognized):
            return

        try:
            pe = pefile.PE(str(file_path), fast_load=True)
        except pefile.PEFormatError as e:
            result.pe_info['error'] = str(e)
            self.logger.warning(f"pefile nu a putut parsa {file_path.name}: {e}")
            return

        try:
            machine = pe.FILE_HEADER.Machine
        finally:
            pe.close()

        consistent = machine == result.detection.machine_type
        result.pe_info['machine'] = machine
        result.pe_info['machine_name'] = machine_name(machine)
        result.pe_info['consistent'] = consistent
        if not consistent:
            self.logger.warning(
                f"Machine diferit pentru {file_path.name}: "
                f"header 0x{result.detection.machine_type:04X}, pefile 0x{machine:04X}"
            )
