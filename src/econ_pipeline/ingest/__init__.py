"""Ingest package for raw World Bank indicator files.

This module reads each raw indicator export, reshapes it to long format,
standardizes country names, removes aggregates and missing values, and
saves the per-indicator cleaned files.
"""

from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)


def init_ingest_package() -> None:
    """Initialize the ingest package and log package details."""
    logger.debug("🚢 Initializing Ingest Package")
    logger.debug("   📦 Package responsible for cleaning raw indicator files")


# Call initialization when the package is imported
init_ingest_package()
