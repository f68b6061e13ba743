"""Wide-to-long reshaping of World Bank indicator tables.

Raw exports hold one column per calendar year. Before pivoting, every
candidate column name is parsed into an explicit ``YearColumn``; columns
that do not carry a 4-digit year (for example the ``Unnamed: 68`` column
pandas creates for the trailing comma in World Bank files) are discarded
and logged rather than treated as data.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

import pandas as pd

from econ_pipeline.catalog import LONG_COLUMNS, empty_frame
from econ_pipeline.logging_config import create_logger
from econ_pipeline.reader import METADATA_COLUMNS

logger = create_logger(__name__)

# A standalone 4-digit year from 1800 to 2099
YEAR_PATTERN = re.compile(r"(?<!\d)(?:1[89]|20)\d{2}(?!\d)")

# pandas names header cells it found empty "Unnamed: <position>"
UNNAMED_PREFIX = "Unnamed:"


@dataclass(frozen=True)
class YearColumn:
    """A raw column name and the calendar year parsed from it."""

    column: str
    year: int


@dataclass
class ReshapeResult:
    """Long table plus what the reshaper discarded along the way."""

    data: pd.DataFrame
    year_columns: List[YearColumn] = field(default_factory=list)
    discarded_columns: List[str] = field(default_factory=list)
    null_values_dropped: int = 0


def parse_year_columns(columns) -> Tuple[List[YearColumn], List[str]]:
    """Split candidate column names into year columns and discarded ones.

    The first standalone 4-digit year (1800-2099) in a name is its year.
    Positional ``Unnamed: N`` columns never count as years. When two
    columns resolve to the same year only the first is kept.

    Args:
        columns: Candidate column names (everything after the metadata columns)

    Returns:
        Tuple of (retained YearColumn list, discarded column names)
    """
    retained: List[YearColumn] = []
    discarded: List[str] = []
    seen_years = set()

    for column in columns:
        name = str(column)
        match = None if name.startswith(UNNAMED_PREFIX) else YEAR_PATTERN.search(name)
        if not match:
            discarded.append(column)
            continue

        year = int(match.group(0))
        if year in seen_years:
            logger.warning(f"Duplicate year column {column!r} for {year}, discarding")
            discarded.append(column)
            continue

        seen_years.add(year)
        retained.append(YearColumn(column=column, year=year))

    return retained, discarded


def reshape_world_bank_table(raw: pd.DataFrame) -> ReshapeResult:
    """Pivot a wide World Bank table into one row per country and year.

    Args:
        raw: Wide table as returned by ``read_world_bank_csv``

    Returns:
        ReshapeResult holding the long table sorted by (country_name, year)
    """
    candidates = [col for col in raw.columns if col not in METADATA_COLUMNS]
    year_columns, discarded = parse_year_columns(candidates)

    if discarded:
        logger.info(f"Discarded {len(discarded)} non-year columns: {discarded}")

    if not year_columns:
        logger.warning("No valid year columns found, returning empty table")
        return ReshapeResult(
            data=empty_frame(LONG_COLUMNS), discarded_columns=discarded
        )

    wide = raw[METADATA_COLUMNS + [yc.column for yc in year_columns]].rename(
        columns={yc.column: yc.year for yc in year_columns}
    )

    long = wide.melt(
        id_vars=METADATA_COLUMNS,
        value_vars=[yc.year for yc in year_columns],
        var_name="year",
        value_name="value",
    )
    long["year"] = long["year"].astype("int64")
    long["value"] = pd.to_numeric(long["value"], errors="coerce").astype("float64")

    null_mask = long["value"].isna()
    null_count = int(null_mask.sum())
    if null_count:
        logger.info(f"Dropped {null_count} empty observations while pivoting")

    long = (
        long.loc[~null_mask, LONG_COLUMNS]
        .sort_values(["country_name", "year"], kind="mergesort")
        .reset_index(drop=True)
    )

    return ReshapeResult(
        data=long,
        year_columns=year_columns,
        discarded_columns=discarded,
        null_values_dropped=null_count,
    )


def convert_to_long_format(raw: pd.DataFrame) -> pd.DataFrame:
    """Convert a wide World Bank table to long format.

    :param raw: World Bank data in wide format (years as columns)
    :return: Long table with ``year`` and ``value`` columns
    """
    return reshape_world_bank_table(raw).data
