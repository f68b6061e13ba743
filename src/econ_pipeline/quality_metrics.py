"""Data quality validation for indicator tables.

This module runs non-blocking, rule-based checks on each indicator:
missing-value ratio, indicator-specific outlier bounds, per-country
coverage and temporal gaps. Findings are collected into a report and
logged; the data itself is never modified.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from econ_pipeline.config import (
    LOW_COVERAGE_PCT,
    MISSING_VALUE_WARN_PCT,
    OUTLIER_THRESHOLDS,
)
from econ_pipeline.exceptions import ExportError
from econ_pipeline.logging_config import create_logger

logger = create_logger(__name__)

OUTLIER_COLUMNS = ["country_code", "country_name", "year", "value"]
COVERAGE_COLUMNS = [
    "country_code",
    "country_name",
    "years_available",
    "year_range",
    "coverage_pct",
]
GAP_COLUMNS = ["country_code", "country_name", "year", "previous_year", "year_gap"]


@dataclass
class ValidationReport:
    """Quality findings for a single indicator."""

    indicator: str
    timestamp: str
    total_observations: int
    missing_count: int
    missing_percentage: float
    outliers: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=OUTLIER_COLUMNS))
    low_coverage_countries: pd.DataFrame = field(
        default_factory=lambda: pd.DataFrame(columns=COVERAGE_COLUMNS)
    )
    temporal_gaps: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=GAP_COLUMNS))
    warnings: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.warnings

    def to_dict(self) -> Dict:
        """JSON-serialisable view of the report."""
        return {
            "indicator": self.indicator,
            "timestamp": self.timestamp,
            "total_observations": self.total_observations,
            "missing_count": self.missing_count,
            "missing_percentage": self.missing_percentage,
            "passed": self.passed,
            "warnings": list(self.warnings),
            "outliers": _records(self.outliers),
            "low_coverage_countries": _records(self.low_coverage_countries),
            "temporal_gaps": _records(self.temporal_gaps),
        }


@dataclass
class ValidationResult:
    """The unmodified data together with its validation report."""

    data: pd.DataFrame
    report: ValidationReport


def _records(frame: pd.DataFrame) -> List[Dict]:
    # Round-trip through JSON to turn numpy scalars into plain Python values
    return json.loads(frame.to_json(orient="records"))


def find_outliers(
    data: pd.DataFrame, bounds: Dict[str, float]
) -> pd.DataFrame:
    """Rows whose value lies outside ``[bounds['min'], bounds['max']]``.

    Sorted by descending absolute value.
    """
    present = data[data["value"].notna()]
    mask = (present["value"] < bounds["min"]) | (present["value"] > bounds["max"])
    outliers = present.loc[mask, OUTLIER_COLUMNS]
    order = outliers["value"].abs().sort_values(ascending=False, kind="mergesort").index
    return outliers.loc[order].reset_index(drop=True)


def country_coverage(data: pd.DataFrame) -> pd.DataFrame:
    """Share of the indicator's distinct years each country has data for.

    Sorted by ascending coverage.
    """
    present = data[data["value"].notna()]
    total_years = data["year"].nunique()
    if present.empty or total_years == 0:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)

    coverage = (
        present.groupby("country_code", sort=True)
        .agg(
            country_name=("country_name", "first"),
            years_available=("year", "size"),
            first_year=("year", "min"),
            last_year=("year", "max"),
        )
        .reset_index()
    )
    coverage["year_range"] = (
        coverage["first_year"].astype(str) + " - " + coverage["last_year"].astype(str)
    )
    coverage["coverage_pct"] = (coverage["years_available"] / total_years * 100).round(2)

    return coverage[COVERAGE_COLUMNS].sort_values(
        "coverage_pct", kind="mergesort"
    ).reset_index(drop=True)


def find_temporal_gaps(data: pd.DataFrame) -> pd.DataFrame:
    """Observations preceded by a jump of more than one year within a country."""
    present = data[data["value"].notna()]
    if present.empty:
        return pd.DataFrame(columns=GAP_COLUMNS)

    present = present.sort_values(["country_code", "year"], kind="mergesort")
    previous_year = present.groupby("country_code", sort=False)["year"].shift(1)
    gaps = present.assign(
        previous_year=previous_year,
        year_gap=present["year"] - previous_year,
    )
    gaps = gaps[gaps["year_gap"] > 1]
    gaps = gaps.astype({"previous_year": "int64", "year_gap": "int64"})
    return gaps[GAP_COLUMNS].reset_index(drop=True)


def validate_data_quality(
    data: pd.DataFrame,
    indicator_type: str,
    thresholds: Optional[Dict[str, Dict[str, float]]] = None,
) -> ValidationResult:
    """Run every quality check for one indicator.

    Args:
        data: Long table for a single indicator
        indicator_type: Indicator short name used to pick outlier bounds
        thresholds: Per-indicator ``{"min": .., "max": ..}`` overrides of
            OUTLIER_THRESHOLDS

    Returns:
        ValidationResult with ``data`` untouched and the findings report
    """
    logger.info(f"=== Data Quality Validation for {indicator_type} ===")

    bounds_by_indicator = dict(OUTLIER_THRESHOLDS)
    if thresholds:
        bounds_by_indicator.update(thresholds)

    total = len(data)
    missing_count = int(data["value"].isna().sum())
    missing_pct = round(missing_count / total * 100, 2) if total else 0.0

    report = ValidationReport(
        indicator=indicator_type,
        timestamp=datetime.now().isoformat(),
        total_observations=total,
        missing_count=missing_count,
        missing_percentage=missing_pct,
    )

    # Check 1: missing values
    if missing_pct > MISSING_VALUE_WARN_PCT:
        report.warnings.append(f"High missing values: {missing_pct}%")

    # Check 2: outliers against economic plausibility bounds
    bounds = bounds_by_indicator.get(indicator_type)
    if bounds is not None:
        report.outliers = find_outliers(data, bounds)
        if not report.outliers.empty:
            report.warnings.append(f"Found {len(report.outliers)} potential outliers")

    # Check 3: coverage by country
    coverage = country_coverage(data)
    low_coverage = coverage[coverage["coverage_pct"] < LOW_COVERAGE_PCT].reset_index(drop=True)
    report.low_coverage_countries = low_coverage
    if not low_coverage.empty:
        report.warnings.append(
            f"{len(low_coverage)} countries with <{LOW_COVERAGE_PCT:g}% data coverage"
        )

    # Check 4: temporal consistency
    report.temporal_gaps = find_temporal_gaps(data)
    if not report.temporal_gaps.empty:
        report.warnings.append(f"Found {len(report.temporal_gaps)} temporal gaps in data")

    logger.info(f"Total observations: {report.total_observations}")
    logger.info(f"Missing values: {report.missing_count} ({report.missing_percentage}%)")

    if report.warnings:
        logger.warning("Warnings:")
        for warning in report.warnings:
            logger.warning(f"  - {warning}")
    else:
        logger.info("No data quality issues detected")

    return ValidationResult(data=data, report=report)


def export_validation_reports(reports: Dict[str, ValidationReport], output_path: str) -> None:
    """Write all validation reports to one JSON document.

    Args:
        reports: Mapping of indicator short name to its report
        output_path: Path to output JSON file

    Raises:
        ExportError: If the file cannot be written
    """
    payload = {name: report.to_dict() for name, report in reports.items()}
    try:
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2)
    except OSError as e:
        raise ExportError(f"Error exporting validation reports to {output_path}: {e}") from e
    logger.info(f"Validation reports exported to {output_path}")
