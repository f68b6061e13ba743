"""Catalog module for the unified dataset's schema and data dictionary.

This module is the single place that knows the column names, their
semantic types and their human-readable descriptions. The reshaper,
merger and exporter all build on it.
"""

import datetime
from typing import Dict, List, Optional

import pandas as pd

from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)

LONG_COLUMNS = [
    "country_name",
    "country_code",
    "indicator_name",
    "indicator_code",
    "year",
    "value",
]

# Layout of the per-indicator <indicator>_cleaned.csv files
CLEANED_COLUMNS = LONG_COLUMNS + ["indicator_short"]

DERIVED_COLUMNS = [
    "yoy_change",
    "yoy_pct_change",
    "growth_rate",
    "trend_indicator",
    "value_3yr_avg",
]

OUTPUT_COLUMNS = CLEANED_COLUMNS + DERIVED_COLUMNS + [
    "data_quality_score",
    "last_updated",
]

COLUMN_SCHEMA = {
    "country_name": "String",
    "country_code": "String",
    "indicator_name": "String",
    "indicator_code": "String",
    "year": "Int",
    "value": "Float",
    "indicator_short": "String",
    "yoy_change": "Float",
    "yoy_pct_change": "Float",
    "growth_rate": "Float",
    "trend_indicator": "String",
    "value_3yr_avg": "Float",
    "data_quality_score": "Float",
    "last_updated": "Date",
}

COLUMN_DESCRIPTIONS = {
    "country_name": "Standardized country name",
    "country_code": "ISO 3-letter country code",
    "indicator_name": "Full indicator name from World Bank",
    "indicator_code": "World Bank indicator code",
    "year": "Year of observation",
    "value": "Indicator value in original units",
    "indicator_short": "Short indicator name (gdp, inflation, cpi, gdp_deflator)",
    "yoy_change": "Year-over-year absolute change",
    "yoy_pct_change": "Year-over-year percentage change",
    "growth_rate": "Growth rate (context-dependent calculation)",
    "trend_indicator": "Trend classification (increasing/decreasing/stable/unknown)",
    "value_3yr_avg": "3-year rolling average value",
    "data_quality_score": "Data quality score (0-1)",
    "last_updated": "Date when data was last processed",
}

PANDAS_DTYPES = {
    "String": "object",
    "Int": "int64",
    "Float": "float64",
    "Date": "object",
}


def empty_frame(columns: List[str]) -> pd.DataFrame:
    """Build an empty DataFrame with the declared dtype of every column."""
    return pd.DataFrame(
        {col: pd.Series(dtype=PANDAS_DTYPES[COLUMN_SCHEMA[col]]) for col in columns}
    )


def _to_string(series: pd.Series) -> pd.Series:
    return series.map(lambda v: v if pd.isna(v) else str(v)).astype("object")


def _to_date(series: pd.Series) -> pd.Series:
    return pd.to_datetime(series, errors="coerce").dt.date.astype("object")


def coerce_types(data: pd.DataFrame) -> pd.DataFrame:
    """Cast every known column to its declared semantic type.

    Columns that are not part of the schema are left untouched. Integer
    columns must not contain nulls.

    Args:
        data: Frame to coerce

    Returns:
        A coerced copy of ``data``
    """
    data = data.copy()
    for col in data.columns:
        semantic_type = COLUMN_SCHEMA.get(col)
        if semantic_type == "String":
            data[col] = _to_string(data[col])
        elif semantic_type == "Int":
            data[col] = pd.to_numeric(data[col], errors="raise").astype("int64")
        elif semantic_type == "Float":
            data[col] = pd.to_numeric(data[col], errors="coerce").astype("float64")
        elif semantic_type == "Date":
            data[col] = _to_date(data[col])
    return data


def build_data_dictionary(columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Describe each output column: name, semantic type and description.

    Args:
        columns: Columns to describe, defaults to OUTPUT_COLUMNS

    Returns:
        DataFrame with ``column_name, data_type, description``
    """
    columns = columns or OUTPUT_COLUMNS
    rows: List[Dict[str, str]] = [
        {
            "column_name": col,
            "data_type": COLUMN_SCHEMA[col],
            "description": COLUMN_DESCRIPTIONS[col],
        }
        for col in columns
    ]
    return pd.DataFrame(rows, columns=["column_name", "data_type", "description"])


def today() -> datetime.date:
    """Processing date used for ``last_updated``."""
    return datetime.date.today()
