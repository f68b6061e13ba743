"""Unify module for merging indicators into the final economic dataset.

Cleaned indicator tables (fresh from the ingest step, or reloaded from the
``<indicator>_cleaned.csv`` files) get their derived metrics and a quality
validation pass, are merged into one long table and exported together with
a data dictionary and per-indicator summary statistics.
"""

import datetime
import os
from typing import Dict, Iterable, Optional

import duckdb
import numpy as np
import pandas as pd

from econ_pipeline import config
from econ_pipeline.catalog import (
    CLEANED_COLUMNS,
    DERIVED_COLUMNS,
    LONG_COLUMNS,
    OUTPUT_COLUMNS,
    build_data_dictionary,
    coerce_types,
    empty_frame,
    today,
)
from econ_pipeline.derived_metrics import calculate_derived_metrics
from econ_pipeline.error_handler import IndicatorOutcome, RunReport
from econ_pipeline.exceptions import ExportError
from econ_pipeline.logging_config import create_logger
from econ_pipeline.quality_metrics import (
    ValidationReport,
    export_validation_reports,
    validate_data_quality,
)
from econ_pipeline.utils import ensure_directory, file_size_mb, sidecar_path

logger = create_logger(__name__)

UNIQUE_KEY = ["country_code", "indicator_short", "year"]
SORT_KEY = ["country_name", "indicator_short", "year"]

SUMMARY_COLUMNS = [
    "indicator_short",
    "total_observations",
    "unique_countries",
    "year_range_start",
    "year_range_end",
    "missing_values",
    "missing_percentage",
    "mean_value",
    "median_value",
    "min_value",
    "max_value",
]

SUMMARY_QUERY = """
    SELECT
        indicator_short,
        COUNT(*) AS total_observations,
        COUNT(DISTINCT country_code) AS unique_countries,
        MIN(year) AS year_range_start,
        MAX(year) AS year_range_end,
        CAST(SUM(CASE WHEN value IS NULL THEN 1 ELSE 0 END) AS BIGINT) AS missing_values,
        ROUND(100.0 * SUM(CASE WHEN value IS NULL THEN 1 ELSE 0 END) / COUNT(*), 2)
            AS missing_percentage,
        ROUND(AVG(value), 2) AS mean_value,
        ROUND(MEDIAN(value), 2) AS median_value,
        MIN(value) AS min_value,
        MAX(value) AS max_value
    FROM observations
    GROUP BY indicator_short
    ORDER BY indicator_short
"""


def merge_indicator_tables(
    tables: Iterable[pd.DataFrame], run_date: Optional[datetime.date] = None
) -> pd.DataFrame:
    """Union indicator tables into the unified dataset.

    Rows without a value or year are dropped, as are repeated
    (country_code, indicator_short, year) keys after the first. Columns are
    coerced to their declared types, quality score and processing date are
    stamped, and rows are sorted by (country_name, indicator_short, year).

    Args:
        tables: Indicator tables carrying the derived metric columns
        run_date: Processing date for ``last_updated``, defaults to today

    Returns:
        Unified DataFrame with exactly OUTPUT_COLUMNS
    """
    frames = [t for t in tables if t is not None and not t.empty]
    if frames:
        combined = pd.concat(frames, ignore_index=True)
    else:
        combined = empty_frame(CLEANED_COLUMNS + DERIVED_COLUMNS)
    combined = combined.reindex(columns=CLEANED_COLUMNS + DERIVED_COLUMNS)

    incomplete = combined["value"].isna() | combined["year"].isna()
    if incomplete.any():
        logger.warning(f"Dropping {int(incomplete.sum())} rows without value or year")
        combined = combined[~incomplete]

    duplicated = combined.duplicated(subset=UNIQUE_KEY, keep="first")
    if duplicated.any():
        logger.warning(
            f"Dropping {int(duplicated.sum())} duplicate "
            f"(country_code, indicator_short, year) rows"
        )
        combined = combined[~duplicated]

    combined = combined.assign(
        data_quality_score=np.select(
            [combined["value"].isna(), combined["yoy_change"].isna()],
            [0.0, 0.7],
            default=1.0,
        ),
        last_updated=run_date or today(),
    )
    combined = coerce_types(combined)

    return (
        combined.sort_values(SORT_KEY, kind="mergesort")
        .reset_index(drop=True)[OUTPUT_COLUMNS]
    )


def summarize_indicators(
    unified: pd.DataFrame, connection: Optional[duckdb.DuckDBPyConnection] = None
) -> pd.DataFrame:
    """Summary statistics per indicator, computed with DuckDB.

    Args:
        unified: Unified dataset
        connection: DuckDB connection. If None, a temporary in-memory one is used.

    Returns:
        One row per ``indicator_short`` with SUMMARY_COLUMNS
    """
    if unified.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    con = connection if connection else duckdb.connect()
    try:
        con.register(
            "observations", unified[["indicator_short", "country_code", "year", "value"]]
        )
        summary = con.execute(SUMMARY_QUERY).fetchdf()
        con.unregister("observations")
    finally:
        if connection is None:
            con.close()

    return summary[SUMMARY_COLUMNS]


def log_unified_summary(unified: pd.DataFrame) -> None:
    """Log headline figures for the unified dataset."""
    logger.info("=== Unified Dataset Summary ===")
    logger.info(f"Total observations: {len(unified)}")
    if unified.empty:
        return

    logger.info(f"Countries: {unified['country_name'].nunique()}")
    logger.info(f"Indicators: {', '.join(unified['indicator_short'].unique())}")
    logger.info(f"Year range: {unified['year'].min()} - {unified['year'].max()}")

    for indicator, group in unified.groupby("indicator_short"):
        logger.info(
            f"  {indicator}: {len(group)} observations, "
            f"{group['country_name'].nunique()} countries, "
            f"{group['year'].nunique()} years"
        )


class Unify:
    """Build and export the unified economic dataset.

    Key features:
    - Reload cleaned indicator files when no fresh tables are given
    - Add derived metrics and validate each indicator
    - Merge all indicators into one sorted, typed table
    - Export the dataset, its data dictionary and summary statistics
    """

    def __init__(
        self,
        cleaned_data_dir: Optional[str] = None,
        output_path: Optional[str] = None,
        thresholds: Optional[Dict[str, Dict[str, float]]] = None,
        run_date: Optional[datetime.date] = None,
        export_validation: Optional[bool] = None,
    ) -> None:
        """Initialize the Unify process.

        :param cleaned_data_dir: Directory holding ``<indicator>_cleaned.csv``
        :param output_path: Path of the unified CSV
        :param thresholds: Outlier bound overrides passed to the validator
        :param run_date: Processing date stamped into ``last_updated``
        :param export_validation: Also write the validation JSON sidecar
        """
        self.cleaned_data_dir = cleaned_data_dir or config.CLEANED_DATA_DIR
        self.output_path = output_path or config.UNIFIED_OUTPUT_PATH
        self.thresholds = thresholds
        self.run_date = run_date
        self.export_validation = (
            config.EXPORT_VALIDATION_REPORT if export_validation is None else export_validation
        )
        self.report = RunReport()
        self.validation_reports: Dict[str, ValidationReport] = {}

    @staticmethod
    def _invalid_rows(data: pd.DataFrame) -> int:
        """Count rows whose year or value does not parse as a number.

        ``year`` and ``value`` are converted in place; an empty ``value``
        is missing, not invalid.
        """
        year = pd.to_numeric(data["year"], errors="coerce")
        value = pd.to_numeric(data["value"], errors="coerce")

        bad_year = year.isna() | (year.notna() & (year % 1 != 0))
        bad_value = value.isna() & data["value"].notna()

        data["year"] = year
        data["value"] = value
        return int((bad_year | bad_value).sum())

    def load_cleaned(self) -> Dict[str, pd.DataFrame]:
        """Reload the per-indicator cleaned CSV files.

        Missing or unreadable files are recorded as skipped indicators.

        :return: Indicator short name -> cleaned table
        """
        logger.info("Loading data from cleaned CSV files...")

        for indicator in config.INDICATORS:
            file_path = os.path.join(self.cleaned_data_dir, f"{indicator}_cleaned.csv")
            if not os.path.isfile(file_path):
                self.report.add(
                    IndicatorOutcome.skipped(indicator, reason=f"File not found: {file_path}")
                )
                continue

            try:
                data = pd.read_csv(file_path, dtype={"country_code": str, "country_name": str})
            except (OSError, ValueError) as e:
                self.report.add(
                    IndicatorOutcome.skipped(
                        indicator,
                        reason=f"Error reading file {file_path}: {e}",
                        source_path=file_path,
                    )
                )
                continue

            missing_columns = [col for col in LONG_COLUMNS if col not in data.columns]
            if missing_columns:
                self.report.add(
                    IndicatorOutcome.skipped(
                        indicator,
                        reason=f"{file_path} is missing columns {missing_columns}",
                        source_path=file_path,
                    )
                )
                continue

            invalid = self._invalid_rows(data)
            if invalid:
                self.report.add(
                    IndicatorOutcome.skipped(
                        indicator,
                        reason=f"{file_path} has {invalid} rows with a non-numeric "
                        f"value or non-integer year",
                        source_path=file_path,
                    )
                )
                continue

            data["year"] = data["year"].astype("int64")
            data["value"] = data["value"].astype("float64")
            if "indicator_short" not in data.columns:
                data["indicator_short"] = indicator

            logger.info(f"Loaded {indicator} data: {len(data)} observations")
            self.report.add(IndicatorOutcome.success(indicator, data, source_path=file_path))

        return self.report.processed_tables()

    def combine(self, processed: Optional[Dict[str, pd.DataFrame]] = None) -> pd.DataFrame:
        """Combine all economic indicators into the unified dataset.

        :param processed: Indicator short name -> cleaned table; reloaded
            from the cleaned files when None
        :return: Unified DataFrame
        """
        logger.info("=== Combining Economic Datasets ===")

        if processed is None:
            processed = self.load_cleaned()

        # Configured indicators first, then any extra ones in the given order
        ordered = [i for i in config.INDICATORS if i in processed]
        ordered += [i for i in processed if i not in ordered]

        validated = []
        for indicator in ordered:
            data = processed[indicator]
            if data is None:
                continue

            try:
                data_with_metrics = calculate_derived_metrics(data, indicator)
                result = validate_data_quality(data_with_metrics, indicator, self.thresholds)
            except (KeyError, TypeError, ValueError) as e:
                self.report.add(
                    IndicatorOutcome.skipped(
                        indicator, reason=f"Error calculating metrics for {indicator}: {e}"
                    )
                )
                continue
            self.validation_reports[indicator] = result.report

            validated.append(result.data)
            logger.info(f"Added {indicator} data: {len(result.data)} observations")

        unified = merge_indicator_tables(validated, run_date=self.run_date)
        log_unified_summary(unified)
        return unified

    def export(self, unified: pd.DataFrame, output_path: Optional[str] = None) -> Dict[str, str]:
        """Export the unified dataset with its dictionary and summary.

        :param unified: Unified dataset from ``combine``
        :param output_path: Path of the unified CSV, defaults to the configured one
        :return: Artifact name -> written path
        :raises ExportError: If the directory or any file cannot be written
        """
        logger.info("=== Exporting Unified Dataset ===")

        output_path = output_path or self.output_path
        ensure_directory(os.path.dirname(output_path))

        paths = {
            "dataset": output_path,
            "dictionary": sidecar_path(output_path, "_dictionary.csv"),
            "summary": sidecar_path(output_path, "_summary.csv"),
        }

        try:
            unified[OUTPUT_COLUMNS].to_csv(paths["dataset"], index=False)
            logger.info(f"Successfully exported unified dataset to: {paths['dataset']}")
            logger.info(f"File size: {file_size_mb(paths['dataset'])} MB")

            build_data_dictionary().to_csv(paths["dictionary"], index=False)
            logger.info(f"Data dictionary exported to: {paths['dictionary']}")

            summarize_indicators(unified).to_csv(paths["summary"], index=False)
            logger.info(f"Summary statistics exported to: {paths['summary']}")
        except OSError as e:
            raise ExportError(f"Error exporting dataset to {output_path}: {e}") from e

        if self.export_validation:
            paths["validation"] = sidecar_path(output_path, "_validation.json")
            export_validation_reports(self.validation_reports, paths["validation"])

        return paths

    def run(self, processed: Optional[Dict[str, pd.DataFrame]] = None) -> pd.DataFrame:
        """
        Main method: combine all indicators and export the result.

        :param processed: Fresh cleaned tables; reloaded from disk when None
        :return: Unified DataFrame
        :raises ExportError: If the export fails
        """
        logger.info("=== Building Unified Economic Dataset with Quality Controls ===")

        unified = self.combine(processed)
        self.export(unified)
        if processed is None or self.report.has_skips():
            self.report.log_summary()

        logger.info("=== Unified dataset build completed ===")
        return unified


if __name__ == "__main__":
    try:
        config.validate_config()
        Unify().run()
    except Exception as e:
        logger.error(f"Unify process failed: {e}")
        exit(1)
