"""
Scan history persisted in SQLite through SQLAlchemy.
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from pearch.core.analyzer import STATUSES, ScanResult
from pearch.core.detector import Invalid, Recognized
from pearch.database.models import Base, ScanRecord


class ScanRepository:
    def __init__(self, db_path="pe_arch.db"):
        self.engine = create_engine(f"sqlite:///{db_path}", echo=False)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine)
        self.session = Session()
        self.logger = logging.getLogger("ScanRepository")

    def save_scan(self, result: ScanResult) -> int:
        detection = result.detection
        record = ScanRecord(
            file_path=result.file_path,
            file_name=Path(result.file_path).name,
            sha256=result.file_hash.get("sha256"),
            status=result.status,
            architecture=detection.architecture_name if isinstance(detection, Recognized) else None,
            machine_type=detection.machine_type if isinstance(detection, Recognized) else None,
            reason=detection.reason if isinstance(detection, Invalid) else None,
            errors=json.dumps(result.errors) if result.errors else None,
            timestamp=result.timestamp,
            scan_duration=result.scan_duration,
        )
        self.session.add(record)
        self.session.commit()
        self.logger.debug(f"Scanare salvata: {record.file_name} (id={record.id})")
        return record.id

    def list_scans(self, limit: int = 50, status: Optional[str] = None) -> List[ScanRecord]:
        stmt = select(ScanRecord).order_by(ScanRecord.timestamp.desc(), ScanRecord.id.desc())
        if status:
            stmt = stmt.where(ScanRecord.status == status)
        return list(self.session.scalars(stmt.limit(limit)))

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(ScanRecord))

    def status_counts(self) -> Dict[str, int]:
        """Number of stored scans per status; every known status is present."""
        counts = dict.fromkeys(STATUSES, 0)
        stmt = select(ScanRecord.status, func.count()).group_by(ScanRecord.status)
        for status, total in self.session.execute(stmt):
            counts[status] = total
        return counts

    def close(self):
        self.session.close()
        self.engine.dispose()
