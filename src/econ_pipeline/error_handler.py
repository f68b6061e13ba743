"""
Per-indicator outcomes and run reporting for the pipeline.

Every indicator is processed independently. Instead of letting an error
in one indicator abort the run, each step returns an ``IndicatorOutcome``
that is either a success carrying the indicator's table or a skip carrying
the reason. ``RunReport`` aggregates the outcomes for the whole run.

Example:
    report = RunReport()
    for indicator, path in sources.items():
        report.add(ingest.process_indicator(indicator, path))

    report.log_summary()
    tables = report.processed_tables()
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from econ_pipeline.logging_config import create_logger
from econ_pipeline.missing_values import MissingValueReport

logger = create_logger(__name__)


class OutcomeStatus(str, Enum):
    """Result of processing one indicator."""
    SUCCESS = "success"
    SKIPPED = "skipped"


@dataclass
class IndicatorOutcome:
    """What happened to one indicator during a run.

    Attributes:
        indicator: Indicator short name
        status: Success or skipped
        data: Cleaned table for successful indicators
        source_path: File the indicator was read from
        reason: Why the indicator was skipped
        raw_missing_values: Empty observations dropped while pivoting
        missing_report: Missing-value handler report
    """

    indicator: str
    status: OutcomeStatus
    data: Optional[pd.DataFrame] = None
    source_path: Optional[str] = None
    reason: Optional[str] = None
    raw_missing_values: int = 0
    missing_report: Optional[MissingValueReport] = None

    @classmethod
    def success(cls, indicator: str, data: pd.DataFrame, **kwargs) -> "IndicatorOutcome":
        return cls(indicator=indicator, status=OutcomeStatus.SUCCESS, data=data, **kwargs)

    @classmethod
    def skipped(cls, indicator: str, reason: str, **kwargs) -> "IndicatorOutcome":
        return cls(indicator=indicator, status=OutcomeStatus.SKIPPED, reason=reason, **kwargs)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def rows(self) -> int:
        return 0 if self.data is None else len(self.data)


class RunReport:
    """Collects indicator outcomes so the run can continue past failures."""

    def __init__(self):
        self.outcomes: List[IndicatorOutcome] = []

    def add(self, outcome: IndicatorOutcome) -> IndicatorOutcome:
        """Record an outcome and return it.

        A later outcome for the same indicator replaces the earlier one, so
        a table that loads but fails a later step ends up skipped.

        Args:
            outcome: The indicator outcome to record
        """
        for position, existing in enumerate(self.outcomes):
            if existing.indicator == outcome.indicator:
                self.outcomes[position] = outcome
                break
        else:
            self.outcomes.append(outcome)
        if not outcome.ok:
            logger.warning(f"Skipping {outcome.indicator}: {str(outcome.reason)[:200]}")
        return outcome

    @property
    def successes(self) -> List[IndicatorOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def skipped(self) -> List[IndicatorOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def has_successes(self) -> bool:
        """Check if any indicator was processed."""
        return len(self.successes) > 0

    def has_skips(self) -> bool:
        """Check if any indicator was skipped."""
        return len(self.skipped) > 0

    def processed_tables(self) -> Dict[str, pd.DataFrame]:
        """Tables of the successful indicators, in processing order."""
        return {o.indicator: o.data for o in self.successes}

    def log_summary(self) -> None:
        """Log a summary of processed and skipped indicators."""
        total = len(self.outcomes)
        if total == 0:
            logger.info("No indicators processed")
            return

        logger.info(f"Processed indicators: {len(self.successes)}/{total}")
        for outcome in self.successes:
            logger.info(f"  - {outcome.indicator}: {outcome.rows} observations")

        if self.has_skips():
            logger.warning(f"Skipped indicators: {len(self.skipped)}/{total}")
            for outcome in self.skipped:
                logger.warning(f"  - {outcome.indicator}: {str(outcome.reason)[:100]}")
