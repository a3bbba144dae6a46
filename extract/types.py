"""
Value types shared by every extractor
"""

from dataclasses import dataclass
import enum


class ExtractFormat(str, enum.Enum):
    """Output shape an extraction is asked to produce"""
    STRUCTURED = "structured"
    TEXT = "text"
    BYTES = "bytes"


@dataclass(frozen=True)
class Checkpoint:
    """
    Opaque resume position for incremental extraction.

    The encoding of ``value`` belongs to the extractor that produced it
    (an ISO timestamp, a max id, a page cursor, ...). Checkpoints are
    replaced, never modified.
    """
    value: str

    def __str__(self) -> str:
        return self.value
