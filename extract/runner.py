"""
Extraction Runner - drives an execution record around one extraction.

The extraction contract knows nothing about telemetry. This runner is the
caller-side glue: it marks the record in progress, runs one retrieval,
records progress, completes or fails the record, and persists it at each
step when a store is configured.
"""

from typing import Any, Dict, Optional
from extract.base import Extractor
from extract.types import ExtractFormat
from telemetry.record import ExecutionRecord
from telemetry.store import ExecutionLogStore
from core.exceptions import ETLException, StorageError
import logging

logger = logging.getLogger(__name__)


def count_items(data: Any) -> int:
    """
    Number of items in an extraction result.

    Lists count their elements. Envelopes shaped like
    ``{"results": [...]}`` or ``{"data": [...]}`` count the wrapped list.
    Text and byte results count characters / bytes. Anything else is one item.
    """
    if isinstance(data, (list, tuple)):
        return len(data)
    if isinstance(data, dict):
        for key in ("results", "data", "items"):
            if isinstance(data.get(key), list):
                return len(data[key])
        return 1
    if isinstance(data, (str, bytes, bytearray, memoryview)):
        return len(data)
    return 0 if data is None else 1


class ExtractionRunner:
    """
    Extraction orchestrator with execution tracking.

    Responsibilities:
    - Run one extraction in the requested format
    - Keep the execution record's status, timing and progress accurate
    - Record checkpoints before/after for incremental sources
    - Persist the record on start, success and failure (if a store is set)

    Errors from the extractor are never swallowed: the record is marked
    failed and the original exception is re-raised. A store that fails
    while saving the failed record is logged and does not replace it.
    """

    def __init__(self, store: Optional[ExecutionLogStore] = None):
        self.store = store

    async def _persist(self, record: ExecutionRecord):
        if self.store is not None:
            await self.store.save(record)

    @staticmethod
    def _merge_metadata(record: ExecutionRecord, **items: Any):
        current = record.metadata
        merged: Dict[str, Any] = dict(current) if isinstance(current, dict) else {}
        if current is not None and not isinstance(current, dict):
            merged["value"] = current
        merged.update(items)
        record.set_metadata(merged)

    async def run(
        self,
        extractor: Extractor,
        fmt: ExtractFormat = ExtractFormat.STRUCTURED,
        record: Optional[ExecutionRecord] = None,
        shape: Any = None,
        source_uri: Optional[str] = None,
        destination_uri: Optional[str] = None
    ) -> Any:
        """
        Run one extraction and track it.

        Args:
            extractor: Configured data source
            fmt: Output format to extract
            record: Record to drive; a new "extract" record is created if omitted
            shape: Target shape for structured extraction
            source_uri: Stored on the record (e.g. the request URL)
            destination_uri: Stored on the record

        Returns:
            The extracted data
        """
        fmt = ExtractFormat(fmt)
        source_name = extractor.source_name()
        record = record or ExecutionRecord.new(source_name, "extract")

        record.add_tag(f"format:{fmt.value}")
        if source_uri is not None or destination_uri is not None:
            record.set_source_destination(
                source_uri or record.source_uri,
                destination_uri or record.destination_uri
            )

        incremental = extractor.supports_incremental()
        if incremental:
            before = extractor.checkpoint()
            self._merge_metadata(
                record, checkpoint_before=before.value if before else None
            )

        record.mark_in_progress()
        logger.info(f"Starting {fmt.value} extraction for {source_name} (execution {record.id})")

        try:
            await self._persist(record)
            data = await extractor.extract_format(fmt, shape)
        except Exception as e:
            message = e.message if isinstance(e, ETLException) else str(e)
            logger.error(f"Extraction failed for {source_name}: {message}")
            record.mark_failed(message)
            if isinstance(e, ETLException):
                self._merge_metadata(record, error=e.to_dict())
            try:
                await self._persist(record)
            except StorageError as storage_error:
                # The extraction error is what the caller needs to see
                logger.error(
                    f"Could not save failed execution {record.id}: {storage_error}"
                )
            raise

        items = count_items(data)
        record.update_progress(items, items)

        if incremental:
            after = extractor.checkpoint()
            self._merge_metadata(
                record, checkpoint_after=after.value if after else None
            )

        record.mark_completed()
        await self._persist(record)

        logger.info(
            f"Extraction completed for {source_name}. "
            f"Items: {items}, elapsed: {record.elapsed_ms} ms"
        )
        return data
