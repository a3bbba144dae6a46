"""
Core utilities and configuration for the extraction toolkit.

This package provides foundational components used throughout:

Modules:
    config: Application configuration and environment variable management
    database: Async engine and session factory for the execution log store
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import create_engine, create_session_maker
    from core.exceptions import TransportError, DecodeError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    engine = create_engine()
    async with create_session_maker(engine)() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "create_engine",
    "create_session_maker",
    "setup_logging",
    # Exceptions
    "ETLException",
    "RetryableError",
    "NonRetryableError",
    "ExtractionError",
    "TransportError",
    "RequestBuildError",
    "DecodeError",
    "ExtractOperationError",
    "UnsupportedOperationError",
    "StorageError",
]
