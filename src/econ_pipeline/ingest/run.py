"""Ingest module for cleaning raw World Bank indicator files.

Each indicator goes through the same chain, independently of the others:

    read -> reshape -> standardize names -> drop aggregates -> drop nulls

An indicator whose file is missing or unreadable is skipped and the run
continues with the remaining ones.
"""

import os
from typing import Dict, Optional

import pandas as pd

from econ_pipeline import config
from econ_pipeline.catalog import CLEANED_COLUMNS
from econ_pipeline.countries import filter_aggregate_regions, standardize_country_names
from econ_pipeline.error_handler import IndicatorOutcome, RunReport
from econ_pipeline.exceptions import IngestError
from econ_pipeline.logging_config import create_logger
from econ_pipeline.missing_values import handle_missing_values
from econ_pipeline.reader import read_world_bank_csv
from econ_pipeline.reshape import reshape_world_bank_table
from econ_pipeline.utils import ensure_directory, find_world_bank_export

# Initialize logger
logger = create_logger(__name__)


class Ingest:
    """Manage the cleaning of raw World Bank indicator files.

    Key features:
    - Locate the raw export of every configured indicator
    - Run the per-indicator cleaning chain
    - Record a success or skip outcome per indicator
    - Save the per-indicator cleaned CSV files
    """

    def __init__(
        self,
        raw_data_dir: Optional[str] = None,
        cleaned_data_dir: Optional[str] = None,
        sources: Optional[Dict[str, Optional[str]]] = None,
        skip_rows: Optional[int] = None,
    ) -> None:
        """Initialize the Ingest process.

        :param raw_data_dir: Directory holding the raw World Bank downloads
        :param cleaned_data_dir: Directory for the per-indicator cleaned files
        :param sources: Explicit indicator -> file path overrides
        :param skip_rows: Metadata lines above the header row
        """
        self.raw_data_dir = raw_data_dir or config.RAW_DATA_DIR
        self.cleaned_data_dir = cleaned_data_dir or config.CLEANED_DATA_DIR
        self.sources = sources or {}
        self.skip_rows = config.SKIP_ROWS if skip_rows is None else skip_rows
        self.report = RunReport()

        logger.info("Initializing Ingest Process")
        logger.info(f"   Raw data directory: {self.raw_data_dir}")

    def resolve_sources(self) -> Dict[str, Optional[str]]:
        """Find the raw file for every indicator.

        Explicit paths (constructor ``sources`` first, then the
        ``<INDICATOR>_SOURCE_FILE`` environment variables) win over files
        discovered in the raw data directory.

        :return: Indicator short name -> file path, or None when not found
        """
        resolved: Dict[str, Optional[str]] = {}
        for indicator in config.INDICATORS:
            path = self.sources.get(indicator) or config.INDICATOR_SOURCE_FILES.get(indicator)
            if not path:
                path = find_world_bank_export(
                    self.raw_data_dir, config.INDICATOR_CODES[indicator]
                )
            resolved[indicator] = path
            logger.info(f"Source for {indicator}: {path or 'not found'}")
        return resolved

    def process_indicator(self, indicator: str, file_path: Optional[str]) -> IndicatorOutcome:
        """Run the cleaning chain for one indicator.

        :param indicator: Indicator short name
        :param file_path: Raw World Bank CSV for the indicator
        :return: Success outcome with the cleaned table, or a skip outcome
        """
        logger.info(f"=== Processing {indicator} data ===")

        if not file_path:
            return IndicatorOutcome.skipped(
                indicator,
                reason=f"No source file found for {config.INDICATOR_CODES.get(indicator, indicator)}",
            )

        try:
            raw = read_world_bank_csv(file_path, skip_rows=self.skip_rows)
        except IngestError as e:
            return IndicatorOutcome.skipped(indicator, reason=str(e), source_path=file_path)

        try:
            reshaped = reshape_world_bank_table(raw)
            data = standardize_country_names(reshaped.data)
            data["indicator_short"] = indicator
            data = filter_aggregate_regions(data)
            data, missing_report = handle_missing_values(data, indicator)
            data = data[CLEANED_COLUMNS]
        except (KeyError, TypeError, ValueError) as e:
            return IndicatorOutcome.skipped(
                indicator,
                reason=f"Error cleaning {file_path}: {e}",
                source_path=file_path,
            )

        if data.empty:
            logger.warning(f"No observations left for {indicator}")
        else:
            logger.info(f"Countries found: {data['country_name'].nunique()}")
            logger.info(f"Year range: {data['year'].min()} - {data['year'].max()}")
        logger.info(f"Total observations: {len(data)}")

        return IndicatorOutcome.success(
            indicator,
            data,
            source_path=file_path,
            raw_missing_values=reshaped.null_values_dropped,
            missing_report=missing_report,
        )

    def cleaned_path(self, indicator: str) -> str:
        """Path of an indicator's cleaned CSV file."""
        return os.path.join(self.cleaned_data_dir, f"{indicator}_cleaned.csv")

    def save_cleaned(self, processed: Dict[str, pd.DataFrame]) -> Dict[str, str]:
        """Save each cleaned indicator table as ``<indicator>_cleaned.csv``.

        A failed write is logged and the remaining files are still written.

        :param processed: Indicator short name -> cleaned table
        :return: Indicator short name -> written file path
        :raises ExportError: If the cleaned data directory cannot be created
        """
        ensure_directory(self.cleaned_data_dir)

        written: Dict[str, str] = {}
        for indicator, data in processed.items():
            output_file = self.cleaned_path(indicator)
            try:
                data.to_csv(output_file, index=False)
            except OSError as e:
                logger.error(f"Failed to save {indicator} data to {output_file}: {e}")
                continue
            written[indicator] = output_file
            logger.info(f"Saved {indicator} data to {output_file}")
        return written

    def run(self, save: bool = True) -> Dict[str, pd.DataFrame]:
        """
        Main method to run the cleaning process for every indicator.

        :param save: Also write the per-indicator cleaned CSV files
        :return: Indicator short name -> cleaned table, for processed indicators
        :raises ExportError: If cleaned files are requested but the directory
            cannot be created
        """
        logger.info("=== Starting World Bank Data Processing ===")

        for indicator, file_path in self.resolve_sources().items():
            self.report.add(self.process_indicator(indicator, file_path))

        processed = self.report.processed_tables()
        if save and processed:
            self.save_cleaned(processed)

        self.report.log_summary()
        logger.info(f"Processed datasets: {', '.join(processed) or 'none'}")
        return processed


if __name__ == "__main__":
    try:
        config.validate_config()
        ingest_process = Ingest()
        ingest_process.run()
    except Exception as e:
        logger.error(f"Ingestion process failed: {e}")
        exit(1)
