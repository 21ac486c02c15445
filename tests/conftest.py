import copy
from struct import pack

import pytest

from pearch.core.analyzer import ArchitectureScanner
from pearch.core.config import DEFAULTS
from pearch.modules import create_default_modules


def build_pe(machine=0x8664, pe_offset=0x80, size=4096, mz_offset=0, signature=b'PE\x00\x00'):
    """
    Minimal synthetic PE header: "MZ" at mz_offset, e_lfanew at mz_offset+0x3C
    pointing to pe_offset, then the PE signature and the COFF Machine field.
    """
    data = bytearray(size)
    data[mz_offset:mz_offset + 2] = b'MZ'
    data[mz_offset + 0x3C:mz_offset + 0x40] = pack('<i', pe_offset)
    data[pe_offset:pe_offset + 4] = signature
    data[pe_offset + 4:pe_offset + 6] = pack('<H', machine)
    return bytes(data)


def build_pe32_plus(machine=0x8664):
    """build_pe image with a complete COFF header and a PE32+ optional header."""
    data = bytearray(build_pe(machine, pe_offset=0x80))
    coff = 0x84
    data[coff + 2:coff + 4] = pack('<H', 0)        # NumberOfSections
    data[coff + 16:coff + 18] = pack('<H', 0xF0)   # SizeOfOptionalHeader
    data[coff + 18:coff + 20] = pack('<H', 0x22)   # Characteristics
    opt = coff + 20
    data[opt:opt + 2] = pack('<H', 0x20B)          # PE32+ magic
    data[opt + 24:opt + 32] = pack('<Q', 0x140000000)  # ImageBase
    data[opt + 32:opt + 36] = pack('<I', 0x1000)   # SectionAlignment
    data[opt + 36:opt + 40] = pack('<I', 0x200)    # FileAlignment
    data[opt + 56:opt + 60] = pack('<I', 0x1000)   # SizeOfImage
    data[opt + 60:opt + 64] = pack('<I', 0x200)    # SizeOfHeaders
    data[opt + 108:opt + 112] = pack('<I', 16)     # NumberOfRvaAndSizes
    return bytes(data)


@pytest.fixture
def make_pe():
    return build_pe


@pytest.fixture
def make_pe32_plus():
    return build_pe32_plus


@pytest.fixture
def config():
    return copy.deepcopy(DEFAULTS)


@pytest.fixture
def scanner(config):
    s = ArchitectureScanner(config)
    for module in create_default_modules(config):
        s.plugin_manager.register_module(module)
    return s


@pytest.fixture
def sample_files(tmp_path, make_pe):
    """A small tree: one x64 image, one x86 dll, one text file and a broken exe."""
    (tmp_path / 'sub').mkdir()
    files = {
        'x64': tmp_path / 'app.exe',
        'x86': tmp_path / 'sub' / 'lib.dll',
        'text': tmp_path / 'readme.txt',
        'broken': tmp_path / 'broken.exe',
    }
    files['x64'].write_bytes(make_pe(0x8664) + b'\x90' * 1000)
    files['x86'].write_bytes(make_pe(0x014C))
    files['text'].write_text('just some text, nothing executable here\n' * 4)
    files['broken'].write_bytes(make_pe(0x8664, signature=b'NE\x00\x00'))
    return files
