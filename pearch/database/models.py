from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ScanRecord(Base):
    __tablename__ = "scans"
    id = Column(Integer, primary_key=True)
    file_path = Column(String(1024))
    file_name = Column(String(256))
    sha256 = Column(String(64))
    status = Column(String(20), index=True)
    architecture = Column(String(64))
    machine_type = Column(Integer)
    reason = Column(String(128))
    errors = Column(Text)
    timestamp = Column(DateTime, default=datetime.now)
    scan_duration = Column(Float)
