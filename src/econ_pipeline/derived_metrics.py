"""Year-over-year changes, growth rates, trends and moving averages.

All metrics are computed per country on rows ordered by year. The lag is
positional: when a year is missing, the previous *available* year is used,
so a country observed in 2010, 2012 and 2015 compares 2012 against 2010.
"""

import numpy as np
import pandas as pd

from econ_pipeline.catalog import DERIVED_COLUMNS
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)

# Indicators that are already rates: growth is the absolute change
RATE_INDICATORS = ("inflation", "cpi", "gdp_deflator")

# |growth_rate| strictly below this is "stable"
STABLE_GROWTH_THRESHOLD = 0.1

MOVING_AVERAGE_WINDOW = 3


def classify_trend(growth_rate: pd.Series) -> pd.Series:
    """Label each growth rate as increasing, decreasing, stable or unknown."""
    conditions = [
        growth_rate.isna(),
        growth_rate.abs() < STABLE_GROWTH_THRESHOLD,
        growth_rate > 0,
        growth_rate < 0,
    ]
    choices = ["unknown", "stable", "increasing", "decreasing"]
    return pd.Series(
        np.select(conditions, choices, default="stable"),
        index=growth_rate.index,
        dtype="object",
    )


def calculate_derived_metrics(data: pd.DataFrame, indicator_type: str) -> pd.DataFrame:
    """Add year-over-year and smoothing metrics to one indicator's table.

    The table is sorted by (country_code, year) here, whatever order the
    caller passes, so results only depend on the rows themselves.

    Args:
        data: Cleaned long table for a single indicator
        indicator_type: Indicator short name (gdp, inflation, cpi, gdp_deflator)

    Returns:
        Sorted copy of ``data`` with the derived metric columns appended
    """
    logger.info(f"Calculating derived metrics for {indicator_type}")

    data = data.sort_values(["country_code", "year"], kind="mergesort").reset_index(
        drop=True
    )
    if "indicator_short" not in data.columns:
        data["indicator_short"] = indicator_type

    if data.empty:
        for col in DERIVED_COLUMNS:
            data[col] = pd.Series(
                dtype="object" if col == "trend_indicator" else "float64"
            )
        return data

    grouped = data.groupby("country_code", sort=False)["value"]
    value_prev = grouped.shift(1)

    data["yoy_change"] = data["value"] - value_prev

    has_base = value_prev.notna() & (value_prev != 0)
    pct_change = (data["value"] - value_prev) / value_prev.abs() * 100
    data["yoy_pct_change"] = pct_change.where(has_base, np.nan)

    if indicator_type in RATE_INDICATORS:
        data["growth_rate"] = data["yoy_change"]
    else:
        data["growth_rate"] = data["yoy_pct_change"]

    data["trend_indicator"] = classify_trend(data["growth_rate"])

    data["value_3yr_avg"] = grouped.transform(
        lambda s: s.rolling(window=MOVING_AVERAGE_WINDOW, min_periods=MOVING_AVERAGE_WINDOW).mean()
    )

    calculated_rows = int(data["yoy_change"].notna().sum())
    logger.info(
        f"Calculated metrics for {calculated_rows} out of {len(data)} observations"
    )

    return data
