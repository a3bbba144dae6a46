"""
Script to extract the latest article from the Spaceflight News API and
record the run in the etl_logs table
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_engine, create_session_maker
from core.exceptions import ETLException
from core.logging import setup_logging
from extract.rest_extractor import RestExtractor
from extract.runner import ExtractionRunner
from extract.types import ExtractFormat
from telemetry.record import ExecutionRecord
from telemetry.store import ExecutionLogStore, ensure_etl_logs_table

logger = logging.getLogger(__name__)


async def run_extract():
    """Extract one article and log the execution"""

    engine = create_engine(settings.DATABASE_URL)
    await ensure_etl_logs_table(engine)
    logger.info("Ensured etl_logs table exists")

    extractor = (
        RestExtractor(
            "https://api.spaceflightnewsapi.net/v4",
            "articles",
            source_name="spaceflight_news"
        )
        .with_query_param([
            ("ordering", "-updated_at"),
            ("limit", "1"),
            ("offset", "0")
        ])
    )
    if settings.API_TOKEN:
        extractor = extractor.with_auth_token(settings.API_TOKEN)

    record = ExecutionRecord.new("spaceflight_latest_article", "extract")
    record.add_tag("example")

    try:
        async with create_session_maker(engine)() as session:
            runner = ExtractionRunner(ExecutionLogStore(session))
            data = await runner.run(
                extractor,
                ExtractFormat.STRUCTURED,
                record=record,
                source_uri=extractor.url
            )

        for article in data.get("results", []):
            logger.info(f"Latest article: {article.get('title')} ({article.get('updated_at')})")

        logger.info(f"Execution {record.id} finished with status {record.status.value}")

    except ETLException as e:
        logger.error(f"Extraction failed: {e}")
        sys.exit(1)
    finally:
        await extractor.aclose()
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run_extract())
