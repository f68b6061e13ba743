"""Pipeline package for cleaning World Bank economic indicators.

This package turns raw World Bank CSV exports (GDP, inflation, CPI and
GDP deflator) into one unified, analysis-ready dataset consumed by the
Global Consumer Pulse dashboard.
"""

import os

from econ_pipeline.logging_config import create_logger

__version__ = "0.1.0"

# Initialize package logging
logger = create_logger(__name__)


def init_pipeline_package() -> None:
    """Initialize the pipeline package and log package details."""
    logger.debug("🚀 Initializing Economic Indicators Pipeline Package")
    logger.debug("   📦 Modules:")
    logger.debug("      • Source reading and reshaping")
    logger.debug("      • Cleaning and derived metrics")
    logger.debug("      • Quality validation and export")

    # Log package path for debugging
    package_path = os.path.dirname(os.path.abspath(__file__))
    logger.debug(f"   📂 Package Path: {package_path}")


# Call initialization when the package is imported
init_pipeline_package()
