import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_engine
from telemetry.store import ensure_etl_logs_table

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    engine = create_engine(settings.DATABASE_URL)

    try:
        created = await ensure_etl_logs_table(engine)
        if created:
            logger.info("etl_logs table created successfully.")
        else:
            logger.info("etl_logs table already exists.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_database())
