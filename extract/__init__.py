"""
Data extraction contract and adapters.

This package defines how data is pulled from external sources, independent
of what happens to it afterwards:

Modules:
    types: ExtractFormat and Checkpoint value types
    base: The Extractor abstract base class (the extraction contract)
    request: Immutable HTTP request template
    rest_extractor: REST/HTTP implementation of the contract
    runner: Runs one extraction while driving an execution record

Architecture:
    Every source implements Extractor. Callers pick a retrieval operation
    per output format (structured, text, bytes), optionally read and set
    checkpoints for incremental sources, and track each run with an
    ExecutionRecord (see the telemetry package).

Usage:
    from extract import RestExtractor, ExtractFormat, ExtractionRunner

Example:
    extractor = (
        RestExtractor("https://api.spaceflightnewsapi.net/v4", "articles")
        .with_query_param([("limit", "10"), ("ordering", "-updated_at")])
    )

    articles = await extractor.extract()

    runner = ExtractionRunner()
    text = await runner.run(extractor, ExtractFormat.TEXT)

Error Handling:
    All failures raise exceptions from core.exceptions. Nothing retries.
"""

from extract.types import Checkpoint, ExtractFormat
from extract.base import Extractor
from extract.request import RequestTemplate
from extract.rest_extractor import RestExtractor, join_url
from extract.runner import ExtractionRunner

__all__ = [
    "Checkpoint",
    "ExtractFormat",
    "Extractor",
    "RequestTemplate",
    "RestExtractor",
    "join_url",
    "ExtractionRunner",
]
