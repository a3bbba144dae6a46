"""
Unit tests for the extraction contract defaults
"""

import dataclasses
import pytest
from typing import Optional
from extract.base import Extractor
from extract.types import Checkpoint, ExtractFormat
from core.exceptions import ExtractOperationError, UnsupportedOperationError


class StaticExtractor(Extractor):
    """Minimal extractor serving a fixed payload"""

    def __init__(self, payload=None):
        self.payload = payload if payload is not None else {"id": 1, "name": "test"}
        self.structured_shapes = []

    async def ping(self):
        return True

    @classmethod
    async def close(cls):
        return None

    async def extract_structured(self, shape=None):
        self.structured_shapes.append(shape)
        return self.payload

    async def extract_text(self):
        return "static"

    async def extract_bytes(self):
        return b"static"

    async def extract_raw(self):
        return memoryview(b"static")

    def source_name(self):
        return "static"

    async def metadata(self):
        return "fixed payload"


class TextOnlyExtractor(StaticExtractor):
    def supported_formats(self):
        return frozenset({ExtractFormat.TEXT})


class CursorExtractor(StaticExtractor):
    """Incremental extractor keeping its cursor in memory"""

    def __init__(self):
        super().__init__()
        self._checkpoint: Optional[Checkpoint] = None

    def supports_incremental(self):
        return True

    def checkpoint(self):
        return self._checkpoint

    def set_checkpoint(self, checkpoint):
        self._checkpoint = checkpoint


class OptInOnlyExtractor(StaticExtractor):
    def supports_incremental(self):
        return True


class TestDefaults:
    """Test optional capabilities an adapter gets for free"""

    def test_incremental_disabled_by_default(self):
        extractor = StaticExtractor()

        assert extractor.supports_incremental() is False
        assert extractor.checkpoint() is None

    def test_set_checkpoint_fails_without_incremental_support(self):
        extractor = StaticExtractor()

        with pytest.raises(UnsupportedOperationError) as exc_info:
            extractor.set_checkpoint(Checkpoint("42"))

        assert isinstance(exc_info.value, ExtractOperationError)
        assert exc_info.value.context["checkpoint_value"] == "42"
        assert exc_info.value.context["source_name"] == "static"

    def test_set_checkpoint_accepted_when_incremental(self):
        OptInOnlyExtractor().set_checkpoint(Checkpoint("42"))

    def test_schema_unknown_by_default(self):
        assert StaticExtractor.schema() is None

    def test_all_formats_supported_by_default(self):
        assert StaticExtractor().supported_formats() == frozenset(ExtractFormat)

    def test_contract_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            Extractor()

    @pytest.mark.asyncio
    async def test_extract_delegates_to_structured(self):
        extractor = StaticExtractor()

        result = await extractor.extract(dict)

        assert result == {"id": 1, "name": "test"}
        assert extractor.structured_shapes == [dict]


class TestFormatDispatch:
    """Test extract_format"""

    @pytest.mark.asyncio
    async def test_dispatch(self):
        extractor = StaticExtractor()

        assert await extractor.extract_format(ExtractFormat.STRUCTURED) == {"id": 1, "name": "test"}
        assert await extractor.extract_format(ExtractFormat.TEXT) == "static"
        assert await extractor.extract_format(ExtractFormat.BYTES) == b"static"

    @pytest.mark.asyncio
    async def test_unsupported_format_fails(self):
        extractor = TextOnlyExtractor()

        assert await extractor.extract_format(ExtractFormat.TEXT) == "static"

        with pytest.raises(UnsupportedOperationError) as exc_info:
            await extractor.extract_format(ExtractFormat.STRUCTURED)

        assert exc_info.value.context["format"] == "structured"

    @pytest.mark.asyncio
    async def test_unknown_format_value(self):
        with pytest.raises(ValueError):
            await StaticExtractor().extract_format("parquet")


class TestCheckpoint:
    """Test checkpoint value semantics"""

    def test_incremental_round_trip(self):
        extractor = CursorExtractor()
        checkpoint = Checkpoint("2025-12-21T10:00:00+00:00")

        extractor.set_checkpoint(checkpoint)

        assert extractor.checkpoint() == checkpoint
        assert str(extractor.checkpoint()) == "2025-12-21T10:00:00+00:00"

    def test_checkpoint_is_immutable(self):
        checkpoint = Checkpoint("1")

        with pytest.raises(dataclasses.FrozenInstanceError):
            checkpoint.value = "2"

    def test_format_values(self):
        assert ExtractFormat("structured") is ExtractFormat.STRUCTURED
        assert ExtractFormat.TEXT == "text"
