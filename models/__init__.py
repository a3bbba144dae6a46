"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and the portable JSON column type
    execution_log: The etl_logs table, one row per execution record

Database Schema:
    Columns use portable SQLAlchemy types so the same model works on
    SQLite (default) and PostgreSQL (JSONB for JSON columns).

Usage:
    from models.execution_log import ExecutionLog

Example:
    row = ExecutionLog(id=uuid.uuid4(), operation="articles", operation_type="extract", status="started", created_at=now)
    session.add(row)
    await session.commit()
"""

__all__ = [
    "Base",
    "JSONType",
    "ExecutionLog",
]
