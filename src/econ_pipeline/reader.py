"""Source reader for World Bank indicator exports.

World Bank CSV downloads carry a few metadata lines above the header row:

    "Data Source","World Development Indicators",
    (blank)
    "Last Updated Date","2024-06-28",
    (blank)
    "Country Name","Country Code","Indicator Name","Indicator Code","1960",...

The reader skips those lines and maps the first four columns to the
pipeline's metadata names. Everything after them is a candidate year column.
"""

import os

import pandas as pd

from econ_pipeline.config import SKIP_ROWS
from econ_pipeline.exceptions import MissingInputFileError, ParseError
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)

METADATA_COLUMNS = ["country_name", "country_code", "indicator_name", "indicator_code"]


def read_world_bank_csv(file_path: str, skip_rows: int = SKIP_ROWS) -> pd.DataFrame:
    """Read a raw World Bank CSV export into a wide table.

    :param file_path: Path to the World Bank CSV file
    :param skip_rows: Number of metadata lines above the header row
    :return: Wide DataFrame whose first four columns are METADATA_COLUMNS
    :raises MissingInputFileError: If the file does not exist
    :raises ParseError: If the file cannot be parsed as a World Bank export
    """
    if not os.path.isfile(file_path):
        raise MissingInputFileError(f"File not found: {file_path}")

    try:
        data = pd.read_csv(file_path, skiprows=skip_rows)
    except Exception as e:
        raise ParseError(f"Error reading file {file_path}: {e}") from e

    if data.shape[1] < len(METADATA_COLUMNS):
        raise ParseError(
            f"Error reading file {file_path}: expected at least "
            f"{len(METADATA_COLUMNS)} columns, found {data.shape[1]}"
        )

    columns = list(data.columns)
    columns[: len(METADATA_COLUMNS)] = METADATA_COLUMNS
    data.columns = columns

    logger.info(f"Successfully read: {os.path.basename(file_path)}")
    logger.info(f"Dimensions: {data.shape[0]} rows x {data.shape[1]} columns")

    return data
