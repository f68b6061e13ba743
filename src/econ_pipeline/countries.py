"""Country name standardization and aggregate-region filtering."""

from typing import Iterable

import pandas as pd

from econ_pipeline.config import REGION_CODE_PREFIXES
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)

# World Bank name -> name used across the dashboard
COUNTRY_NAME_ALIASES = {
    "United States": "United States",
    "Russian Federation": "Russia",
    "Korea, Rep.": "South Korea",
    "Iran, Islamic Rep.": "Iran",
    "Egypt, Arab Rep.": "Egypt",
    "Venezuela, RB": "Venezuela",
}


def standardize_country_names(data: pd.DataFrame) -> pd.DataFrame:
    """Replace historical or alternate country names with canonical ones.

    Names missing from COUNTRY_NAME_ALIASES pass through unchanged.
    """
    data = data.copy()
    data["country_name"] = data["country_name"].replace(COUNTRY_NAME_ALIASES)
    return data


def filter_aggregate_regions(
    data: pd.DataFrame, prefixes: Iterable[str] = REGION_CODE_PREFIXES
) -> pd.DataFrame:
    """Drop World, income-group and regional aggregate rows.

    A row is an aggregate when its country code starts with one of
    ``prefixes``. Rows without a country code are kept.

    Args:
        data: Long table with a ``country_code`` column
        prefixes: Country-code prefixes identifying aggregates

    Returns:
        Filtered copy of ``data`` with a fresh index
    """
    prefixes = tuple(prefixes)
    is_aggregate = (
        data["country_code"]
        .map(lambda code: isinstance(code, str) and code.startswith(prefixes))
        .astype(bool)
    )

    removed = int(is_aggregate.sum())
    if removed:
        removed_codes = sorted(data.loc[is_aggregate, "country_code"].unique())
        logger.info(f"Removed {removed} aggregate rows for codes {removed_codes}")

    return data.loc[~is_aggregate].reset_index(drop=True)
