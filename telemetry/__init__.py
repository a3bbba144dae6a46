"""
Execution telemetry for extraction operations.

Modules:
    record: ExecutionRecord value object, OperationStatus, HostContext
    store: etl_logs table bootstrap and record persistence

Usage:
    from telemetry import ExecutionRecord, ExecutionLogStore, ensure_etl_logs_table

Example:
    record = ExecutionRecord.new("spaceflight_articles", "extract")
    record.mark_in_progress()
    record.update_progress(5, 10)
    record.mark_completed()

    await ensure_etl_logs_table(engine)
    await ExecutionLogStore(session).save(record)
"""

from telemetry.record import ExecutionRecord, HostContext, OperationStatus
from telemetry.store import ExecutionLogStore, ensure_etl_logs_table, ensure_table_exists

__all__ = [
    "ExecutionRecord",
    "HostContext",
    "OperationStatus",
    "ExecutionLogStore",
    "ensure_etl_logs_table",
    "ensure_table_exists",
]
