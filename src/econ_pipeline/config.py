"""Configuration module for project settings and environment variables.

This module manages directory layout, source file locations and the
thresholds used by the cleaning and validation steps. Every value can be
overridden through the environment or a local ``.env`` file.
"""

import os

from dotenv import load_dotenv

from econ_pipeline.exceptions import ConfigurationError
from econ_pipeline.logging_config import create_logger

load_dotenv()

logger = create_logger(__name__)

# get the local root directory
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

DATA_DIR = os.getenv("DATA_DIR", os.path.join(ROOT_DIR, "data"))
RAW_DATA_DIR = os.getenv("RAW_DATA_DIR", os.path.join(DATA_DIR, "raw"))
CLEANED_DATA_DIR = os.getenv("CLEANED_DATA_DIR", os.path.join(DATA_DIR, "cleaned"))
UNIFIED_OUTPUT_PATH = os.getenv(
    "UNIFIED_OUTPUT_PATH", os.path.join(CLEANED_DATA_DIR, "economic_data.csv")
)

# World Bank exports carry 4 metadata lines above the header row
SKIP_ROWS = int(os.getenv("SKIP_ROWS", "4"))

# Indicator short name -> World Bank series code
INDICATOR_CODES = {
    "gdp": "NY.GDP.MKTP.CD",
    "inflation": "FP.CPI.TOTL.ZG",
    "cpi": "FP.CPI.TOTL",
    "gdp_deflator": "NY.GDP.DEFL.KD.ZG",
}
INDICATORS = tuple(INDICATOR_CODES)

# Explicit source files, e.g. GDP_SOURCE_FILE=/data/API_NY.GDP.MKTP.CD.csv
INDICATOR_SOURCE_FILES = {
    indicator: os.getenv(f"{indicator.upper()}_SOURCE_FILE") or None
    for indicator in INDICATORS
}

# Aggregates and regional blocs published alongside countries
REGION_CODE_PREFIXES = (
    "WLD", "EUU", "ECS", "LCN", "MEA", "NAC", "SAS", "SSF", "EAS", "EAP",
)

# Missing values / quality thresholds (percentages)
HIGH_MISSINGNESS_THRESHOLD = float(os.getenv("HIGH_MISSINGNESS_THRESHOLD", "50"))
MISSING_VALUE_WARN_PCT = float(os.getenv("MISSING_VALUE_WARN_PCT", "20"))
LOW_COVERAGE_PCT = float(os.getenv("LOW_COVERAGE_PCT", "50"))

# Upper GDP bound in current US$; raise it as world output grows
GDP_OUTLIER_MAX = float(os.getenv("GDP_OUTLIER_MAX", "30e12"))

OUTLIER_THRESHOLDS = {
    "gdp": {"min": 0.0, "max": GDP_OUTLIER_MAX},
    "inflation": {"min": -50.0, "max": 1000.0},
    "cpi": {"min": 0.0, "max": 1000.0},
    "gdp_deflator": {"min": -50.0, "max": 1000.0},
}

EXPORT_VALIDATION_REPORT = (
    os.getenv("EXPORT_VALIDATION_REPORT", "true").lower() == "true"
)


def validate_config():
    """
    Validate critical configuration parameters.
    Raises ConfigurationError if any required config is missing or invalid.

    :raises ConfigurationError: If configuration is invalid
    """
    required_dirs = [
        ("DATA_DIR", DATA_DIR),
        ("RAW_DATA_DIR", RAW_DATA_DIR),
        ("CLEANED_DATA_DIR", CLEANED_DATA_DIR),
    ]

    for dir_name, dir_path in required_dirs:
        if not dir_path:
            raise ConfigurationError(
                f"Missing required directory configuration: {dir_name}"
            )

        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Unable to create directory {dir_name} at {dir_path}: {e}"
            ) from e

    if not UNIFIED_OUTPUT_PATH.endswith(".csv"):
        raise ConfigurationError(
            f"UNIFIED_OUTPUT_PATH must point to a .csv file: {UNIFIED_OUTPUT_PATH}"
        )

    if SKIP_ROWS < 0:
        raise ConfigurationError(f"SKIP_ROWS must be non-negative, got {SKIP_ROWS}")

    for indicator, bounds in OUTLIER_THRESHOLDS.items():
        if bounds["min"] >= bounds["max"]:
            raise ConfigurationError(
                f"Invalid outlier bounds for {indicator}: "
                f"min {bounds['min']} must be below max {bounds['max']}"
            )

    for name, value in [
        ("HIGH_MISSINGNESS_THRESHOLD", HIGH_MISSINGNESS_THRESHOLD),
        ("MISSING_VALUE_WARN_PCT", MISSING_VALUE_WARN_PCT),
        ("LOW_COVERAGE_PCT", LOW_COVERAGE_PCT),
    ]:
        if not 0 <= value <= 100:
            raise ConfigurationError(f"{name} must be a percentage, got {value}")

    logger.info("Configuration validation successful")
