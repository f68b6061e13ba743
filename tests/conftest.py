"""Pytest configuration and shared fixtures for the economic indicators pipeline tests.

This module provides fixtures for:
- Temporary file management
- World Bank style raw CSV files
- Sample long-format indicator tables
"""

import csv
import datetime
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, Sequence, Tuple

import pandas as pd
import pytest

# Raw World Bank exports start with these lines before the header row
WORLD_BANK_PREAMBLE = [
    ["Data Source", "World Development Indicators", ""],
    [],
    ["Last Updated Date", "2024-06-28", ""],
    [],
]

HEADER = ["Country Name", "Country Code", "Indicator Name", "Indicator Code"]

GDP_NAME = "GDP (current US$)"
GDP_CODE = "NY.GDP.MKTP.CD"

RawRow = Tuple[str, str, Sequence[Optional[float]]]


# ============================================================================
# Temporary File Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for testing.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def write_world_bank_csv(
    path: Path,
    years: List[int],
    rows: List[RawRow],
    indicator_name: str = GDP_NAME,
    indicator_code: str = GDP_CODE,
) -> Path:
    """Write a CSV laid out like a World Bank download.

    Includes the 4 metadata lines and the trailing empty column that
    World Bank files carry.

    Args:
        path: Destination file
        years: Year columns
        rows: (country name, country code, values per year) tuples; None is empty
        indicator_name: Value of the Indicator Name column
        indicator_code: Value of the Indicator Code column
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        for line in WORLD_BANK_PREAMBLE:
            if line:
                writer.writerow(line)
            else:
                f.write("\n")
        writer.writerow(HEADER + [str(y) for y in years] + [""])
        for name, code, values in rows:
            cells = ["" if v is None else repr(float(v)) for v in values]
            writer.writerow([name, code, indicator_name, indicator_code] + cells + [""])
    return path


@pytest.fixture(scope="function")
def world_bank_csv(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing World Bank style CSVs into the temporary directory.

    Returns:
        Callable ``(filename, years, rows, indicator_name=..., indicator_code=...)``
    """

    def _write(filename: str, years: List[int], rows: List[RawRow], **kwargs) -> Path:
        return write_world_bank_csv(temp_dir / filename, years, rows, **kwargs)

    return _write


@pytest.fixture(scope="function")
def gdp_rows() -> List[RawRow]:
    """GDP rows for USA, a renamed country and the World aggregate."""
    return [
        ("United States", "USA", [21e12, 23e12]),
        ("Russian Federation", "RUS", [1.49e12, None]),
        ("World", "WLD", [80e12, None]),
    ]


@pytest.fixture(scope="function")
def gdp_csv(world_bank_csv, gdp_rows) -> Path:
    """World Bank style GDP file for 2020-2021."""
    return world_bank_csv(
        "API_NY.GDP.MKTP.CD_DS2_en_csv_v2_19346.csv", [2020, 2021], gdp_rows
    )


@pytest.fixture(scope="function")
def raw_data_structure(temp_dir: Path) -> Dict[str, Path]:
    """Raw directory holding World Bank downloads for all four indicators.

    Returns:
        Dictionary mapping indicator short names to file paths
    """
    raw_dir = temp_dir / "raw"
    years = [2018, 2019, 2020, 2021]
    files = {
        "gdp": write_world_bank_csv(
            raw_dir / "API_NY" / "API_NY.GDP.MKTP.CD_DS2_en_csv_v2_19346.csv",
            years,
            [
                ("United States", "USA", [20.5e12, 21.4e12, 21e12, 23e12]),
                ("France", "FRA", [2.79e12, None, 2.64e12, 2.96e12]),
                ("World", "WLD", [86e12, 87e12, 85e12, 96e12]),
            ],
        ),
        "inflation": write_world_bank_csv(
            raw_dir / "API_FP" / "API_FP.CPI.TOTL.ZG_DS2_en_csv_v2_122376.csv",
            years,
            [
                ("United States", "USA", [2.44, 1.81, 1.23, 4.70]),
                ("Korea, Rep.", "KOR", [1.48, 0.38, 0.54, 2.50]),
                ("Euro area", "EMU", [1.76, 1.20, 0.26, 2.55]),
            ],
            indicator_name="Inflation, consumer prices (annual %)",
            indicator_code="FP.CPI.TOTL.ZG",
        ),
        "cpi": write_world_bank_csv(
            raw_dir / "API_FP-2" / "API_FP.CPI.TOTL_DS2_en_csv_v2_37831.csv",
            years,
            [
                ("United States", "USA", [113.1, 115.2, 116.6, 122.1]),
                ("Iran, Islamic Rep.", "IRN", [None, 272.8, 356.4, 521.2]),
            ],
            indicator_name="Consumer price index (2010 = 100)",
            indicator_code="FP.CPI.TOTL",
        ),
        "gdp_deflator": write_world_bank_csv(
            raw_dir / "API_NY-2" / "API_NY.GDP.DEFL.KD.ZG_DS2_en_csv_v2_37873.csv",
            years,
            [
                ("United States", "USA", [2.4, 1.8, 1.3, 4.6]),
                ("Venezuela, RB", "VEN", [None, None, None, 2100.0]),
            ],
            indicator_name="Inflation, GDP deflator (annual %)",
            indicator_code="NY.GDP.DEFL.KD.ZG",
        ),
    }
    # Metadata files shipped in the same World Bank archive
    (raw_dir / "API_NY" / "Metadata_Country_API_NY.GDP.MKTP.CD_DS2_en_csv_v2_19346.csv").write_text(
        '"Country Code","Region"\n"USA","North America"\n'
    )
    return files


# ============================================================================
# Test Data Fixtures
# ============================================================================

def make_long_table(
    rows: List[Tuple[str, str, int, float]],
    indicator: str = "gdp",
    indicator_name: str = GDP_NAME,
    indicator_code: str = GDP_CODE,
) -> pd.DataFrame:
    """Build a cleaned long table from (country_name, country_code, year, value)."""
    data = pd.DataFrame(rows, columns=["country_name", "country_code", "year", "value"])
    data.insert(2, "indicator_name", indicator_name)
    data.insert(3, "indicator_code", indicator_code)
    data["year"] = data["year"].astype("int64")
    data["value"] = data["value"].astype("float64")
    data["indicator_short"] = indicator
    return data


@pytest.fixture(scope="function")
def long_table() -> Callable[..., pd.DataFrame]:
    """Factory building cleaned long tables, see ``make_long_table``."""
    return make_long_table


@pytest.fixture(scope="function")
def sample_gdp_long() -> pd.DataFrame:
    """Cleaned GDP table with a gap year for Germany."""
    return make_long_table(
        [
            ("United States", "USA", 2020, 21e12),
            ("United States", "USA", 2021, 23e12),
            ("Germany", "DEU", 2010, 3.4e12),
            ("Germany", "DEU", 2012, 3.5e12),
            ("Germany", "DEU", 2015, 3.4e12),
        ]
    )


@pytest.fixture(scope="function")
def sample_inflation_long() -> pd.DataFrame:
    """Cleaned inflation table."""
    return make_long_table(
        [
            ("United States", "USA", 2019, 1.81),
            ("United States", "USA", 2020, 1.23),
            ("United States", "USA", 2021, 4.70),
        ],
        indicator="inflation",
        indicator_name="Inflation, consumer prices (annual %)",
        indicator_code="FP.CPI.TOTL.ZG",
    )


@pytest.fixture(scope="function")
def run_date() -> datetime.date:
    """Fixed processing date."""
    return datetime.date(2024, 7, 1)
