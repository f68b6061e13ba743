"""Missing-value reporting and removal for long indicator tables."""

from dataclasses import dataclass, field
from typing import Tuple

import pandas as pd

from econ_pipeline.config import HIGH_MISSINGNESS_THRESHOLD
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)


@dataclass
class MissingValueReport:
    """Missingness statistics for one indicator."""

    indicator: str
    total_count: int
    missing_count: int
    missing_percentage: float
    high_missing_countries: pd.DataFrame = field(default_factory=pd.DataFrame)
    remaining_count: int = 0


def _percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def summarize_country_missingness(data: pd.DataFrame) -> pd.DataFrame:
    """Per-country totals, missing counts and missing percentages.

    Args:
        data: Long table with ``country_code``, ``country_name`` and ``value``

    Returns:
        DataFrame with ``country_code, country_name, total_obs, missing_obs,
        missing_pct``, sorted by descending ``missing_pct``
    """
    columns = ["country_code", "country_name", "total_obs", "missing_obs", "missing_pct"]
    if data.empty:
        return pd.DataFrame(columns=columns)

    summary = (
        data.assign(_missing=data["value"].isna())
        .groupby("country_code", sort=True)
        .agg(
            country_name=("country_name", "first"),
            total_obs=("_missing", "size"),
            missing_obs=("_missing", "sum"),
        )
        .reset_index()
    )
    summary["missing_obs"] = summary["missing_obs"].astype("int64")
    summary["missing_pct"] = (summary["missing_obs"] / summary["total_obs"] * 100).round(2)

    return summary[columns].sort_values(
        "missing_pct", ascending=False, kind="mergesort"
    ).reset_index(drop=True)


def handle_missing_values(
    data: pd.DataFrame,
    indicator_type: str,
    threshold: float = HIGH_MISSINGNESS_THRESHOLD,
) -> Tuple[pd.DataFrame, MissingValueReport]:
    """Report missing values, flag sparse countries and drop null rows.

    Countries above ``threshold`` percent missing are logged but kept; only
    the individual null observations are removed.

    Args:
        data: Long table for a single indicator
        indicator_type: Indicator label used in log messages
        threshold: Missing percentage above which a country is flagged

    Returns:
        Tuple of (table without null values, MissingValueReport)
    """
    total_count = len(data)
    missing_count = int(data["value"].isna().sum())
    missing_pct = _percentage(missing_count, total_count)

    logger.info(
        f"Missing values for {indicator_type}: {missing_count} / {total_count} "
        f"({missing_pct}%)"
    )

    by_country = summarize_country_missingness(data)
    high_missing = by_country[by_country["missing_pct"] > threshold].reset_index(drop=True)

    if not high_missing.empty:
        logger.warning(f"Countries with >{threshold:g}% missing data:")
        for row in high_missing.itertuples(index=False):
            logger.warning(
                f"  - {row.country_name} ({row.country_code}): "
                f"{row.missing_obs}/{row.total_obs} ({row.missing_pct}%)"
            )

    data_clean = data[data["value"].notna()].reset_index(drop=True)
    logger.info(f"After removing missing values: {len(data_clean)} observations remaining")

    report = MissingValueReport(
        indicator=indicator_type,
        total_count=total_count,
        missing_count=missing_count,
        missing_percentage=missing_pct,
        high_missing_countries=high_missing,
        remaining_count=len(data_clean),
    )
    return data_clean, report
