from pathlib import Path

from pearch.core.analyzer import ScanModule, ScanResult
import hashlib

CHUNK_SIZE = 1024 * 1024


class HashCalculator(ScanModule):
    """
    Modul pentru calculare hash-uri multiple
    Suporta: MD5, SHA1, SHA256
    """

    def __init__(self):
        super().__init__("hash_calculator")

    def analyze(self, file_path: Path, result: ScanResult) -> None:
        """Calculeaza hash-urile fisierului"""
        md5 = hashlib.md5()
        sha1 = hashlib.sha1()
        sha256 = hashlib.sha256()
        size = 0
        with open(file_path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                md5.update(chunk)
                sha1.update(chunk)
                sha256.update(chunk)
                size += len(chunk)

        result.file_hash['md5'] = md5.hexdigest()
        result.file_hash['sha1'] = sha1.hexdigest()
        result.file_hash['sha256'] = sha256.hexdigest()
        result.file_hash['size'] = size

        self.logger.debug(f"Hash-uri calculate: SHA256={result.file_hash['sha256'][:16]}...")
