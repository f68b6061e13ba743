"""Unify package for building the combined economic dataset.

This module adds derived metrics to each cleaned indicator, validates it,
merges everything into one table and exports it with its data dictionary
and summary statistics.
"""

from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)


def init_unify_package() -> None:
    """Initialize the unify package and log package details."""
    logger.debug("🧩 Initializing Unify Package")
    logger.debug("   📦 Package responsible for merging and exporting indicators")


# Call initialization when the package is imported
init_unify_package()
