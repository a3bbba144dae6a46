"""
Abstract base class for data sources (the extraction contract)
"""

from abc import ABC, abstractmethod
from typing import Any, FrozenSet, Optional, Union
from extract.types import Checkpoint, ExtractFormat
from core.exceptions import UnsupportedOperationError
import logging

logger = logging.getLogger(__name__)


class Extractor(ABC):
    """
    Abstract base class for all data sources.

    Required capabilities:
    - Lifecycle: ping, close
    - Retrieval: structured, text, bytes and zero-copy raw bytes
    - Description: source_name, metadata

    Optional capabilities (safe defaults, override to opt in):
    - schema
    - supported_formats
    - Incremental extraction: supports_incremental, checkpoint, set_checkpoint

    An adapter that wants incremental extraction must override both
    ``supports_incremental`` and ``set_checkpoint`` (and usually
    ``checkpoint``).
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def ping(self) -> Any:
        """
        Lightweight reachability check.

        Only confirms the source answers. It is not a substitute for an
        extraction.
        """
        pass

    @classmethod
    @abstractmethod
    async def close(cls) -> None:
        """Release resources held at the adapter-type level"""
        pass

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    @abstractmethod
    async def extract_structured(self, shape: Any = None) -> Any:
        """
        Fetch and decode into a caller-specified shape.

        Args:
            shape: Target type (pydantic model, dataclass, ``dict``,
                ``list[Model]``, ...). ``None`` returns plain decoded values.
        """
        pass

    async def extract(self, shape: Any = None) -> Any:
        """Convenience alias for ``extract_structured``"""
        return await self.extract_structured(shape)

    @abstractmethod
    async def extract_text(self) -> str:
        """Fetch and decode as UTF-8 text"""
        pass

    @abstractmethod
    async def extract_bytes(self) -> bytes:
        """Fetch and return an owned byte buffer"""
        pass

    @abstractmethod
    async def extract_raw(self) -> Union[bytes, memoryview]:
        """Fetch and return the cheapest byte representation available"""
        pass

    def supported_formats(self) -> FrozenSet[ExtractFormat]:
        """Formats this source can produce"""
        return frozenset(ExtractFormat)

    async def extract_format(self, fmt: ExtractFormat, shape: Any = None) -> Any:
        """
        Dispatch to the retrieval operation matching ``fmt``.

        Raises:
            UnsupportedOperationError: If the source does not produce ``fmt``
        """
        fmt = ExtractFormat(fmt)
        if fmt not in self.supported_formats():
            raise UnsupportedOperationError(
                f"Source does not support {fmt.value} extraction",
                context={"source_name": self.source_name(), "format": fmt.value}
            )

        logger.debug(f"Extracting {fmt.value} from {self.source_name()}")

        if fmt is ExtractFormat.STRUCTURED:
            return await self.extract_structured(shape)
        if fmt is ExtractFormat.TEXT:
            return await self.extract_text()
        return await self.extract_bytes()

    # ------------------------------------------------------------------
    # Schema / metadata
    # ------------------------------------------------------------------

    @classmethod
    def schema(cls) -> Optional[str]:
        """Best-effort description of the source's shape, None when unknown"""
        return None

    @abstractmethod
    def source_name(self) -> str:
        """Human-readable source identifier"""
        pass

    @abstractmethod
    async def metadata(self) -> str:
        """Adapter-defined description of the current source state"""
        pass

    # ------------------------------------------------------------------
    # Incremental / checkpointing
    # ------------------------------------------------------------------

    def supports_incremental(self) -> bool:
        return False

    def checkpoint(self) -> Optional[Checkpoint]:
        return None

    def set_checkpoint(self, checkpoint: Checkpoint) -> None:
        """Resume the next extraction from ``checkpoint``"""
        if not self.supports_incremental():
            raise UnsupportedOperationError(
                "Source does not support incremental",
                context={
                    "source_name": self.source_name(),
                    "checkpoint_value": checkpoint.value
                }
            )
