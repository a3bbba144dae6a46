"""
Execution record: in-memory telemetry for one extract/transform/load operation.

A record is created when an operation starts, mutated in place by progress
updates and by a terminal transition, and persisted (or dropped) at the
caller's discretion. It never touches storage itself; see telemetry.store.

Status transitions are not validated. Any mark_* method may be called at
any time, mirroring how callers actually drive long operations (retries,
restarts, late failures). Re-marking a finished record only logs a warning.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
import enum
import logging
import os
import socket
import uuid

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(str, enum.Enum):
    """Execution record status"""
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {OperationStatus.COMPLETED, OperationStatus.FAILED, OperationStatus.CANCELLED}
)


@dataclass(frozen=True)
class HostContext:
    """Host and process an operation runs in"""
    hostname: Optional[str]
    process_id: Optional[int]

    @classmethod
    def current(cls) -> "HostContext":
        return cls(hostname=socket.gethostname() or None, process_id=os.getpid())


class ExecutionRecord(BaseModel):
    """
    Lifecycle, progress and performance of one operation.

    Purpose:
    - Audit trail of every extraction (and any transform/load built on it)
    - Progress and throughput monitoring
    - Error tracking

    Design:
    - ``elapsed_ms`` is recomputed on every terminal mark, never read stale
    - ``progress_percentage`` is processed / max(total, 1) * 100
    - Hierarchical operations link through ``parent_id``
    - Not thread-safe: one writer, readers after persistence
    """

    # Identity
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    parent_id: Optional[uuid.UUID] = None

    # Operation
    operation: str
    operation_type: str

    # Status
    status: OperationStatus = OperationStatus.STARTED
    error_message: Optional[str] = None

    # Timing
    created_at: datetime = Field(default_factory=_utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    elapsed_ms: Optional[int] = None

    # Progress
    total_items: Optional[int] = None
    processed_items: Optional[int] = None
    progress_percentage: Optional[float] = None

    # Performance
    items_per_second: Optional[float] = None
    memory_usage_mb: Optional[float] = None

    # Source / destination
    source_uri: Optional[str] = None
    destination_uri: Optional[str] = None

    # Free-form context
    metadata: Any = None
    tags: List[str] = Field(default_factory=list)

    # Host
    hostname: Optional[str] = None
    process_id: Optional[int] = None

    @classmethod
    def new(
        cls,
        operation: str,
        operation_type: str,
        context: Optional[HostContext] = None,
        parent_id: Optional[uuid.UUID] = None
    ) -> "ExecutionRecord":
        """
        Start a record for a new operation.

        Args:
            operation: Operation name (e.g. "spaceflight_articles")
            operation_type: Category, e.g. "extract", "transform", "load"
            context: Host/process to stamp; defaults to the running process
            parent_id: Id of the enclosing operation, if any
        """
        context = context or HostContext.current()
        now = _utcnow()
        return cls(
            parent_id=parent_id,
            operation=operation,
            operation_type=operation_type,
            created_at=now,
            started_at=now,
            hostname=context.hostname,
            process_id=context.process_id
        )

    def child(self, operation: str, operation_type: str) -> "ExecutionRecord":
        """Start a sub-operation record on the same host"""
        return ExecutionRecord.new(
            operation,
            operation_type,
            context=HostContext(hostname=self.hostname, process_id=self.process_id),
            parent_id=self.id
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def elapsed(self) -> Optional[timedelta]:
        if self.started_at is None or self.completed_at is None:
            return None
        return self.completed_at - self.started_at

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def _calculate_elapsed_time(self):
        elapsed = self.elapsed
        if elapsed is not None:
            self.elapsed_ms = max(int(elapsed.total_seconds() * 1000), 0)

    def _warn_if_terminal(self, target: OperationStatus):
        if self.is_terminal:
            logger.warning(
                f"Execution {self.id} ({self.operation}) is already "
                f"{self.status.value}; marking {target.value}"
            )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def mark_in_progress(self):
        """Enter the working phase; elapsed time is measured from here"""
        self._warn_if_terminal(OperationStatus.IN_PROGRESS)
        self.status = OperationStatus.IN_PROGRESS
        self.started_at = _utcnow()

    def mark_completed(self):
        self._warn_if_terminal(OperationStatus.COMPLETED)
        self.status = OperationStatus.COMPLETED
        self.completed_at = _utcnow()
        self._calculate_elapsed_time()

    def mark_failed(self, error: str):
        self._warn_if_terminal(OperationStatus.FAILED)
        self.status = OperationStatus.FAILED
        self.error_message = error
        self.completed_at = _utcnow()
        self._calculate_elapsed_time()

    def update_progress(self, processed: int, total: int):
        """
        Record progress and recompute throughput.

        Throughput divides by whole elapsed seconds with a floor of one,
        so sub-second operations report at most ``processed`` items/s.
        """
        self.processed_items = processed
        self.total_items = total
        self.progress_percentage = processed / max(total, 1) * 100.0

        if self.started_at is not None:
            seconds = max(int((_utcnow() - self.started_at).total_seconds()), 1)
            self.items_per_second = processed / seconds

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def add_tag(self, tag: str):
        self.tags.append(tag)

    def set_metadata(self, metadata: Any):
        self.metadata = metadata

    def set_source_destination(self, source: Optional[str], destination: Optional[str]):
        self.source_uri = source
        self.destination_uri = destination

    def set_memory_usage(self, megabytes: Optional[float]):
        self.memory_usage_mb = megabytes

    def to_row(self) -> Dict[str, Any]:
        """Flat column -> value mapping of the etl_logs row"""
        return self.model_dump()
