"""Command-line entry point: ``python -m econ_pipeline``.

Runs the full refresh: clean every raw indicator file, then build and
export the unified economic dataset. With ``--from-cleaned`` the raw files
are not read and the previously saved cleaned files are used instead.
"""

import argparse
import sys
from typing import List, Optional

from econ_pipeline import config
from econ_pipeline.exceptions import ConfigurationError, ExportError
from econ_pipeline.ingest.run import Ingest
from econ_pipeline.logging_config import create_logger, log_exception
from econ_pipeline.unify.run import Unify

logger = create_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Clean World Bank indicator exports into a unified economic dataset"
    )
    parser.add_argument(
        "--from-cleaned",
        action="store_true",
        help="Skip the raw files and reload the per-indicator cleaned CSVs",
    )
    parser.add_argument("--raw-dir", default=None, help="Directory of raw World Bank CSVs")
    parser.add_argument(
        "--cleaned-dir", default=None, help="Directory for per-indicator cleaned CSVs"
    )
    parser.add_argument("--output", default=None, help="Path of the unified CSV")
    parser.add_argument(
        "--skip-rows",
        type=int,
        default=None,
        help="Metadata lines above the header row in raw files",
    )
    parser.add_argument(
        "--no-save-cleaned",
        action="store_true",
        help="Do not write the per-indicator cleaned CSVs",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline and return a process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config.validate_config()
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        return 1

    try:
        processed = None
        if not args.from_cleaned:
            ingest = Ingest(
                raw_data_dir=args.raw_dir,
                cleaned_data_dir=args.cleaned_dir,
                skip_rows=args.skip_rows,
            )
            processed = ingest.run(save=not args.no_save_cleaned)
            if not processed:
                logger.error("No indicator could be processed")
                return 1

        unify = Unify(cleaned_data_dir=args.cleaned_dir, output_path=args.output)
        unified = unify.combine(processed)
        if not unify.validation_reports:
            logger.error("No indicator could be combined into the unified dataset")
            return 1

        unify.export(unified)
        # Ingest.run has already logged the outcome of fresh tables
        if args.from_cleaned or unify.report.has_skips():
            unify.report.log_summary()
    except ExportError as e:
        log_exception(logger, e, {"context": "Export"})
        return 1
    except Exception as e:
        log_exception(logger, e, {"context": "Economic data pipeline"})
        raise

    logger.info("=== Data processing complete ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
