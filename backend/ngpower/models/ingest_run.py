from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from ngpower.database import Base


class IngestRunRecord(Base):
    """Append-only run ledger: one row per source per ingest cycle."""
    __tablename__ = "ingest_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_at = Column(DateTime(timezone=True), nullable=False, index=True)
    source = Column(String(10), nullable=False, index=True)  # TCN, IKEJA, MEDIA, ...
    fetched = Column(Integer, default=0)
    rejected = Column(Integer, default=0)
    events = Column(Integer, default=0)
    failed = Column(Integer, default=0)
    timed_out = Column(Integer, default=0)
    errors = Column(Text)  # adapter error messages, newline separated
    published = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())
