"""
Persistence of execution records into the etl_logs table
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import Table, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from models.execution_log import ExecutionLog
from telemetry.record import ExecutionRecord
from core.exceptions import StorageError
import logging
import uuid

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def record_to_log(record: ExecutionRecord) -> ExecutionLog:
    """Build the etl_logs row for ``record``"""
    row = record.to_row()
    row["status"] = record.status.value
    row["log_metadata"] = row.pop("metadata")
    return ExecutionLog(**row)


def log_to_record(row: ExecutionLog) -> ExecutionRecord:
    """Rebuild an execution record from its etl_logs row"""
    return ExecutionRecord(
        id=row.id,
        parent_id=row.parent_id,
        operation=row.operation,
        operation_type=row.operation_type,
        status=row.status,
        error_message=row.error_message,
        created_at=_as_utc(row.created_at),
        started_at=_as_utc(row.started_at),
        completed_at=_as_utc(row.completed_at),
        elapsed_ms=row.elapsed_ms,
        total_items=row.total_items,
        processed_items=row.processed_items,
        progress_percentage=row.progress_percentage,
        items_per_second=row.items_per_second,
        memory_usage_mb=row.memory_usage_mb,
        source_uri=row.source_uri,
        destination_uri=row.destination_uri,
        metadata=row.log_metadata,
        tags=row.tags or [],
        hostname=row.hostname,
        process_id=row.process_id
    )


async def ensure_table_exists(engine: AsyncEngine, table: Table) -> bool:
    """
    Create ``table`` if the database does not have it yet.

    Returns:
        True if the table was created, False if it already existed
    """
    def _ensure(sync_conn) -> bool:
        if inspect(sync_conn).has_table(table.name):
            return False
        table.create(sync_conn)
        return True

    try:
        async with engine.begin() as conn:
            created = await conn.run_sync(_ensure)
    except SQLAlchemyError as e:
        raise StorageError(
            f"Failed to ensure table {table.name} exists",
            context={"operation": "ensure_table", "table_name": table.name},
            original_exception=e
        )

    if created:
        logger.info(f"Created table {table.name}")
    return created


async def ensure_etl_logs_table(engine: AsyncEngine) -> bool:
    """Convenience wrapper for the etl_logs table"""
    return await ensure_table_exists(engine, ExecutionLog.__table__)


class ExecutionLogStore:
    """
    Saves and loads execution records.

    ``save`` inserts a new row or overwrites the row with the same id, so a
    record can be saved when it starts and again when it finishes.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def save(self, record: ExecutionRecord):
        try:
            await self.db.merge(record_to_log(record))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to save execution record",
                context={
                    "operation": "save",
                    "table_name": ExecutionLog.__tablename__,
                    "record_id": str(record.id)
                },
                original_exception=e
            )
        logger.debug(f"Saved execution {record.id} ({record.status.value})")

    async def get(self, record_id: uuid.UUID) -> Optional[ExecutionRecord]:
        try:
            row = await self.db.get(ExecutionLog, record_id)
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to load execution record",
                context={
                    "operation": "get",
                    "table_name": ExecutionLog.__tablename__,
                    "record_id": str(record_id)
                },
                original_exception=e
            )
        return log_to_record(row) if row else None

    async def list_children(self, parent_id: uuid.UUID) -> List[ExecutionRecord]:
        """Sub-operation records of ``parent_id``, oldest first"""
        try:
            result = await self.db.execute(
                select(ExecutionLog)
                .where(ExecutionLog.parent_id == parent_id)
                .order_by(ExecutionLog.created_at)
            )
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to list child execution records",
                context={
                    "operation": "list_children",
                    "table_name": ExecutionLog.__tablename__,
                    "parent_id": str(parent_id)
                },
                original_exception=e
            )
        return [log_to_record(row) for row in result.scalars().all()]
