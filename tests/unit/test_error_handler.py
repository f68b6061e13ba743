"""Unit tests for per-indicator outcomes and the run report."""

import pandas as pd
import pytest

from econ_pipeline.error_handler import IndicatorOutcome, OutcomeStatus, RunReport


@pytest.mark.unit
class TestIndicatorOutcome:
    """Test outcome construction."""

    def test_success(self):
        data = pd.DataFrame({"value": [1.0, 2.0]})

        outcome = IndicatorOutcome.success("gdp", data, source_path="gdp.csv")

        assert outcome.ok
        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.rows == 2
        assert outcome.reason is None

    def test_skipped(self):
        outcome = IndicatorOutcome.skipped("cpi", reason="File not found: cpi.csv")

        assert not outcome.ok
        assert outcome.status == "skipped"
        assert outcome.rows == 0
        assert outcome.data is None


@pytest.mark.unit
class TestRunReport:
    """Test aggregation of outcomes over a run."""

    def test_empty_report(self):
        report = RunReport()

        assert not report.has_successes()
        assert not report.has_skips()
        assert report.processed_tables() == {}
        report.log_summary()

    def test_partial_failure(self):
        report = RunReport()
        gdp = pd.DataFrame({"value": [1.0]})
        inflation = pd.DataFrame({"value": [2.0]})

        report.add(IndicatorOutcome.success("gdp", gdp))
        report.add(IndicatorOutcome.skipped("cpi", reason="unreadable"))
        report.add(IndicatorOutcome.success("inflation", inflation))

        assert report.has_successes()
        assert report.has_skips()
        assert [o.indicator for o in report.successes] == ["gdp", "inflation"]
        assert [o.indicator for o in report.skipped] == ["cpi"]

        tables = report.processed_tables()
        assert list(tables) == ["gdp", "inflation"]
        assert tables["gdp"] is gdp

    def test_later_outcome_replaces_earlier(self):
        """An indicator that loads but fails later counts as skipped once."""
        report = RunReport()
        report.add(IndicatorOutcome.success("gdp", pd.DataFrame({"value": [1.0]})))
        report.add(IndicatorOutcome.success("cpi", pd.DataFrame({"value": [2.0]})))

        report.add(IndicatorOutcome.skipped("gdp", reason="bad values"))

        assert [o.indicator for o in report.outcomes] == ["gdp", "cpi"]
        assert [o.indicator for o in report.skipped] == ["gdp"]
        assert list(report.processed_tables()) == ["cpi"]

    def test_add_returns_outcome(self):
        report = RunReport()
        outcome = IndicatorOutcome.skipped("cpi", reason="missing")

        assert report.add(outcome) is outcome

    def test_log_summary(self):
        report = RunReport()
        report.add(IndicatorOutcome.success("gdp", pd.DataFrame({"value": [1.0]})))
        report.add(IndicatorOutcome.skipped("cpi", reason="x" * 500))

        report.log_summary()
