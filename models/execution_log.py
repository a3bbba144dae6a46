from sqlalchemy import Column, String, DateTime, Float, Integer, Text, Index, Uuid
from models.base import Base, JSONType


class ExecutionLog(Base):
    """
    One row per execution record.

    Purpose:
    - Audit trail of every extraction operation
    - Performance monitoring (elapsed time, throughput, memory)
    - Error tracking and debugging

    Design:
    - Columns map 1:1 onto ExecutionRecord fields (see telemetry.store)
    - metadata and tags are stored as JSON
    - parent_id links sub-operations to their parent
    """
    __tablename__ = "etl_logs"

    # Identity
    id = Column(Uuid(as_uuid=True), primary_key=True)
    parent_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    # Operation
    operation = Column(String(255), nullable=False)
    operation_type = Column(String(100), nullable=False)

    # Status
    status = Column(String(20), nullable=False, index=True)
    error_message = Column(Text, nullable=True)

    # Timing
    created_at = Column(DateTime(timezone=True), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    elapsed_ms = Column(Integer, nullable=True)

    # Progress
    total_items = Column(Integer, nullable=True)
    processed_items = Column(Integer, nullable=True)
    progress_percentage = Column(Float, nullable=True)

    # Performance
    items_per_second = Column(Float, nullable=True)
    memory_usage_mb = Column(Float, nullable=True)

    # Source / destination
    source_uri = Column(Text, nullable=True)
    destination_uri = Column(Text, nullable=True)

    # Free-form context
    log_metadata = Column("metadata", JSONType, nullable=True)
    tags = Column(JSONType, nullable=True)

    # Host
    hostname = Column(String(255), nullable=True)
    process_id = Column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_etl_logs_operation_created", "operation", "created_at"),
    )
