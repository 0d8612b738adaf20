"""Run the cleaning pipeline on a sales table.

Usage:
    python -m housing_cleaner --csv data/nashville_housing.csv --output data/cleaned.csv
    python -m housing_cleaner --database-url sqlite:///./data/housing.db
"""

import argparse
import sys

from housing_cleaner.cleaning import (
    CleaningPipeline,
    CleaningReport,
    create_housing_pipeline,
    format_report,
    remove_duplicates,
)
from housing_cleaner.core.config import CleaningConfig, settings
from housing_cleaner.core.exceptions import CleaningError
from housing_cleaner.database.connection import get_db_context
from housing_cleaner.database.repository import CleaningRunRepository
from housing_cleaner.database.tables import CsvTable, RecordTable, SqlTable
from housing_cleaner.monitoring.logger import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="housing-cleaner",
        description="Clean a real-estate sales table and print a summary report.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--csv", help="CSV file to clean")
    source.add_argument(
        "--database-url",
        help=f"Database holding the sales table (default: {settings.database_url})",
    )
    parser.add_argument("--output", help="Where to write the cleaned CSV (default: overwrite --csv)")
    parser.add_argument(
        "--keep-columns",
        action="store_true",
        help="Do not drop the raw address/date/tax district columns",
    )
    parser.add_argument(
        "--remove-duplicates",
        action="store_true",
        help="Delete duplicate rows instead of only reporting them",
    )
    parser.add_argument(
        "--show-duplicates", action="store_true", help="List duplicate rows in the report"
    )
    return parser


def run(
    pipeline: CleaningPipeline,
    table: RecordTable,
    report: CleaningReport,
    remove: bool = False,
) -> CleaningReport:
    """Run a pipeline, optionally deleting reported duplicates before writing back."""
    if not remove:
        return pipeline.run(table, source=report.source, report=report)

    def drop_reported(records: list[dict], report: CleaningReport) -> list[dict]:
        return remove_duplicates(records, report.duplicate_ids)

    return pipeline.run(table, source=report.source, before_write=drop_reported, report=report)


def record_run(table: SqlTable, report: CleaningReport, error: str | None = None) -> None:
    """Persist the run summary next to the cleaned table."""
    with get_db_context(table.session_factory) as db:
        CleaningRunRepository(db).record_run(report, success=error is None, error=error)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    config = CleaningConfig.from_settings(settings)
    if args.keep_columns:
        config.drop_columns_after_split = False
    pipeline = create_housing_pipeline(config)

    if args.csv:
        table: RecordTable = CsvTable(args.csv, output_path=args.output)
        source = args.csv
        sql_table = None
    else:
        url = args.database_url or settings.database_url
        sql_table = SqlTable.from_url(url)
        table = sql_table
        source = url.split("@")[-1]

    report = CleaningReport(source=source)
    try:
        report = run(pipeline, table, report, remove=args.remove_duplicates)
    except CleaningError as e:
        logger.error(f"Cleaning failed: {e}")
        if sql_table is not None:
            record_run(sql_table, report, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    if sql_table is not None:
        record_run(sql_table, report)

    print(format_report(report, show_duplicates=args.show_duplicates))
    return 0


if __name__ == "__main__":
    sys.exit(main())
