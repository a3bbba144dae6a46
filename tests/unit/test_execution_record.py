"""
Unit tests for the execution record
"""

import logging
import os
import time
import uuid
import pytest
from datetime import timedelta
from telemetry.record import ExecutionRecord, HostContext, OperationStatus
from models.execution_log import ExecutionLog


class TestCreation:

    def test_new_record(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)

        assert isinstance(record.id, uuid.UUID)
        assert record.parent_id is None
        assert record.status == OperationStatus.STARTED
        assert record.created_at == clock.now
        assert record.started_at == clock.now
        assert record.completed_at is None
        assert record.hostname == "test-host"
        assert record.process_id == 4242
        assert record.tags == []
        assert record.metadata is None

    def test_ids_are_unique(self, host_context):
        first = ExecutionRecord.new("a", "extract", context=host_context)
        second = ExecutionRecord.new("a", "extract", context=host_context)
        assert first.id != second.id

    def test_default_context_is_current_process(self):
        record = ExecutionRecord.new("articles", "extract")

        assert record.process_id == os.getpid()
        assert record.hostname == HostContext.current().hostname

    def test_child_links_to_parent(self, host_context):
        parent = ExecutionRecord.new("pipeline", "etl", context=host_context)
        child = parent.child("articles", "extract")

        assert child.parent_id == parent.id
        assert child.id != parent.id
        assert child.hostname == "test-host"
        assert child.process_id == 4242


class TestTransitions:

    def test_mark_in_progress_resets_start(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        created = record.created_at

        clock.advance(3)
        record.mark_in_progress()

        assert record.status == OperationStatus.IN_PROGRESS
        assert record.started_at == created + timedelta(seconds=3)
        assert record.created_at == created

    def test_elapsed_measured_from_in_progress(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        clock.advance(10)
        record.mark_in_progress()
        clock.advance(1.5)
        record.mark_completed()

        assert record.status == OperationStatus.COMPLETED
        assert record.elapsed == timedelta(seconds=1.5)
        assert record.elapsed_ms == 1500

    def test_elapsed_undefined_until_completed(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.mark_in_progress()

        assert record.elapsed is None
        assert record.elapsed_ms is None

    def test_elapsed_matches_wall_clock(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.mark_in_progress()
        time.sleep(0.05)
        record.mark_completed()

        assert 40 <= record.elapsed_ms < 2000

    def test_mark_failed(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.mark_in_progress()
        clock.advance(2)
        record.mark_failed("Connection refused")

        assert record.status == OperationStatus.FAILED
        assert record.error_message == "Connection refused"
        assert record.completed_at == clock.now
        assert record.elapsed_ms == 2000
        assert record.is_terminal

    def test_mark_completed_leaves_error_message(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.mark_completed()

        assert record.error_message is None

    def test_elapsed_recomputed_on_every_terminal_mark(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        clock.advance(1)
        record.mark_completed()
        clock.advance(4)
        record.mark_failed("late failure")

        assert record.status == OperationStatus.FAILED
        assert record.elapsed_ms == 5000

    def test_transitions_are_permissive_but_logged(self, host_context, caplog):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.mark_completed()

        with caplog.at_level(logging.WARNING, logger="telemetry.record"):
            record.mark_in_progress()

        assert record.status == OperationStatus.IN_PROGRESS
        assert "already completed" in caplog.text

    def test_cancelled_is_caller_set(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.status = OperationStatus.CANCELLED

        assert record.is_terminal
        assert record.completed_at is None


class TestProgress:

    def test_percentage(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.update_progress(5, 10)

        assert record.progress_percentage == 50.0
        assert record.processed_items == 5
        assert record.total_items == 10

    def test_zero_total_does_not_divide_by_zero(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.update_progress(0, 0)

        assert record.progress_percentage == 0.0
        assert record.items_per_second == 0.0

    def test_processed_above_total_not_rejected(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.update_progress(15, 10)

        assert record.progress_percentage == 150.0

    def test_throughput_whole_seconds(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        clock.advance(4.7)
        record.update_progress(100, 200)

        assert record.items_per_second == 25.0

    def test_throughput_sub_second_floor(self, host_context, clock):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        clock.advance(0.2)
        record.update_progress(10, 10)

        assert record.items_per_second == 10.0

    def test_no_throughput_without_start(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.started_at = None
        record.update_progress(10, 10)

        assert record.items_per_second is None


class TestSettersAndSerialization:

    def test_setters(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.add_tag("spaceflight")
        record.add_tag("daily")
        record.set_metadata({"page": 3})
        record.set_source_destination("https://api.example.com/data", None)
        record.set_memory_usage(12.5)

        assert record.tags == ["spaceflight", "daily"]
        assert record.metadata == {"page": 3}
        assert record.source_uri == "https://api.example.com/data"
        assert record.destination_uri is None
        assert record.memory_usage_mb == 12.5

    def test_row_matches_table_columns(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        columns = {column.name for column in ExecutionLog.__table__.columns}

        assert set(record.to_row()) == columns

    def test_json_round_trip(self, host_context):
        record = ExecutionRecord.new("articles", "extract", context=host_context)
        record.add_tag("daily")
        record.set_metadata({"nested": {"values": [1, 2]}})
        record.update_progress(3, 4)
        record.mark_completed()

        restored = ExecutionRecord.model_validate_json(record.model_dump_json())

        assert restored.model_dump() == record.model_dump()
