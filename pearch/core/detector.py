"""
PE architecture detection over a raw header buffer.

The detector is a pure function: it receives the first bytes of a file
(normally 4096) and decides whether they describe a PE image and, if so,
which machine the image targets. It never touches the filesystem and never
raises for malformed input; every outcome is a DetectionResult variant.
"""

import struct
from dataclasses import dataclass
from typing import Any, Dict, Union

MIN_HEADER_SIZE = 64
DEFAULT_HEADER_SIZE = 4096

DOS_SIGNATURE = b"MZ"
PE_SIGNATURE = b"PE\x00\x00"

# DOS header field holding the file offset of the PE signature (e_lfanew)
E_LFANEW_OFFSET = 0x3C
# COFF header Machine field, relative to the PE signature
COFF_MACHINE_OFFSET = 0x4

MACHINE_TYPES: Dict[int, str] = {
    0x014C: "x86 (32-bit)",
    0x8664: "x64 (64-bit)",
    0x01C0: "ARM",
    0xAA64: "ARM64",
    0x0162: "MIPS R3000",
    0x0166: "MIPS R4000",
    0x0168: "MIPS R10000",
    0x0169: "MIPS WCE v2",
    0x0184: "Alpha AXP",
    0x01A2: "Hitachi SH3",
    0x01A3: "Hitachi SH3 DSP",
    0x01A6: "Hitachi SH4",
    0x01A8: "Hitachi SH5",
    0x01C2: "ARM Thumb",
    0x01C4: "ARM Thumb-2",
    0x0200: "Intel Itanium",
    0x9041: "Mitsubishi M32R",
    0x0284: "Alpha AXP 64-bit",
}

REASON_TRUNCATED = "buffer truncated before PE header offset field"
REASON_OUT_OF_RANGE = "PE header offset out of range"
REASON_BAD_SIGNATURE = "PE signature mismatch"


@dataclass(frozen=True)
class Recognized:
    architecture_name: str
    machine_type: int

    status = "recognized"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "architecture": self.architecture_name,
            "machine_type": self.machine_type,
            "machine_type_hex": f"0x{self.machine_type:04X}",
        }


@dataclass(frozen=True)
class NotRecognized:
    status = "not_recognized"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status}


@dataclass(frozen=True)
class Invalid:
    reason: str

    status = "invalid"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "reason": self.reason}


DetectionResult = Union[Recognized, NotRecognized, Invalid]


def machine_name(machine_type: int) -> str:
    """Human readable name for a COFF machine type."""
    try:
        return MACHINE_TYPES[machine_type]
    except KeyError:
        return f"Unknown (0x{machine_type:04X})"


def _inspect_candidate(data: bytes, mz_offset: int) -> DetectionResult:
    """Validate the PE structure referenced by the DOS header at mz_offset."""
    field_offset = mz_offset + E_LFANEW_OFFSET
    if field_offset + 4 > len(data):
        return Invalid(REASON_TRUNCATED)

    (pe_offset,) = struct.unpack_from("<i", data, field_offset)
    if pe_offset <= 0 or pe_offset + len(PE_SIGNATURE) + 2 > len(data):
        return Invalid(REASON_OUT_OF_RANGE)

    if data[pe_offset:pe_offset + len(PE_SIGNATURE)] != PE_SIGNATURE:
        return Invalid(REASON_BAD_SIGNATURE)

    (machine,) = struct.unpack_from("<H", data, pe_offset + COFF_MACHINE_OFFSET)
    return Recognized(machine_name(machine), machine)


def detect_architecture(buffer, continue_on_invalid: bool = False) -> DetectionResult:
    """
    Detect the target architecture of a PE image from its leading bytes.

    Only the first "MZ" occurrence is examined unless continue_on_invalid is
    set, in which case an Invalid candidate makes the scan resume one byte
    later. The first Recognized candidate wins; when every candidate is
    invalid the outcome of the first one is returned.
    """
    data = bytes(buffer)
    if len(data) < MIN_HEADER_SIZE:
        return NotRecognized()

    first_invalid = None
    start = 0
    while True:
        mz_offset = data.find(DOS_SIGNATURE, start)
        if mz_offset < 0:
            break

        outcome = _inspect_candidate(data, mz_offset)
        if isinstance(outcome, Recognized) or not continue_on_invalid:
            return outcome

        if first_invalid is None:
            first_invalid = outcome
        start = mz_offset + 1

    return first_invalid or NotRecognized()
