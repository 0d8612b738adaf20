"""Sales table cleaning pipeline."""

import time
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from housing_cleaner.core.config import CleaningConfig
from housing_cleaner.core.exceptions import ParseError, PipelineError, SchemaError
from housing_cleaner.monitoring.logger import (
    get_logger,
    log_run_complete,
    log_run_start,
    log_step_complete,
)

from .deduplicator import DuplicateDetector
from .imputer import AddressImputer
from .normalizer import CategoricalNormalizer, DateNormalizer
from .pruner import ColumnPruner
from .records import (
    REQUIRED_COLUMNS,
    SALE_DATE,
    SALE_DATE_CONVERTED,
    SALE_DATE_WARNING,
    SOLD_AS_VACANT,
    SOLD_AS_VACANT_CLEANED,
    TAX_DISTRICT,
    UNIQUE_ID,
    Record,
    is_missing,
)
from .report import CleaningReport, TableState
from .splitter import AddressSplitter

if TYPE_CHECKING:
    from housing_cleaner.database.tables import RecordTable

logger = get_logger(__name__)

StepFunc = Callable[[list[Record], CleaningReport], None]


@dataclass
class CleaningStep:
    """Single step in cleaning pipeline."""

    name: str
    state: TableState  # state reached once the step completes
    func: StepFunc

    def apply(self, records: list[Record], report: CleaningReport) -> None:
        """Run the step over the rows, mutating them in place."""
        self.func(records, report)


class CleaningPipeline:
    """Ordered cleaning steps applied to a whole table.

    Each step runs on a copy of the working rows; the copy replaces the
    working rows only when the step finishes. The table is written once,
    after the last step, so a failure anywhere leaves it untouched.
    """

    def __init__(
        self,
        name: str = "default",
        required_columns: tuple[str, ...] | list[str] = REQUIRED_COLUMNS,
    ) -> None:
        """Initialize cleaning pipeline.

        Args:
            name: Pipeline name for logging
            required_columns: Columns every record must carry
        """
        self.name = name
        self.required_columns = tuple(required_columns)
        self._steps: list[CleaningStep] = []
        self._state = TableState.RAW

    @property
    def steps(self) -> list[CleaningStep]:
        return list(self._steps)

    @property
    def state(self) -> TableState:
        """State reached by the last run."""
        return self._state

    def add_step(self, step: CleaningStep) -> "CleaningPipeline":
        """Add cleaning step to pipeline.

        Args:
            step: CleaningStep to add

        Returns:
            Self for chaining
        """
        self._steps.append(step)
        return self

    def validate(self, records: list[Record]) -> None:
        """Check the table can be cleaned before touching it.

        Args:
            records: Table rows

        Raises:
            SchemaError: On a missing column or a missing/repeated unique id
        """
        seen = set()
        for index, record in enumerate(records):
            missing = [c for c in self.required_columns if c not in record]
            if missing:
                raise SchemaError(f"Row {index} is missing column(s): {', '.join(missing)}")

            uid = record[UNIQUE_ID]
            if is_missing(uid):
                raise SchemaError(f"Row {index} has no {UNIQUE_ID}")
            if uid in seen:
                raise SchemaError(f"Duplicate {UNIQUE_ID}: {uid}")
            seen.add(uid)

    def clean(
        self, records: list[Record], report: CleaningReport | None = None
    ) -> tuple[list[Record], CleaningReport]:
        """Clean a list of records without a backing table.

        The input rows are not modified.

        Args:
            records: Table rows
            report: Report to fill in (a new one by default)

        Returns:
            Tuple of (cleaned rows, report)

        Raises:
            SchemaError: Input cannot be cleaned
            PipelineError: A step failed
        """
        report = report or CleaningReport()
        self._state = TableState.RAW

        self.validate(records)
        report.rows_processed = len(records)
        working = [dict(record) for record in records]

        for step in self._steps:
            candidate = [dict(record) for record in working]
            issues_before = len(report.issues)
            start = time.monotonic()

            try:
                step.apply(candidate, report)
            except Exception as e:
                logger.error(f"Pipeline '{self.name}' aborted at step {step.name}: {e}")
                raise PipelineError(step.name, self._state, e) from e

            working = candidate
            self._state = step.state
            report.final_state = step.state
            log_step_complete(
                step.name,
                step.state.value,
                time.monotonic() - start,
                issues=len(report.issues) - issues_before,
            )

        return working, report

    def run(
        self,
        table: "RecordTable",
        source: str | None = None,
        before_write: Callable[[list[Record], CleaningReport], list[Record]] | None = None,
        report: CleaningReport | None = None,
    ) -> CleaningReport:
        """Read, clean and write back a table.

        Args:
            table: Table exposing read_all/write_all
            source: Description for logs and the report
            before_write: Caller hook applied to the cleaned rows before they are
                written (e.g. deleting reported duplicates)
            report: Report to fill in; pass one to keep the partial counters
                and final state when the run fails

        Returns:
            Run report

        Raises:
            SchemaError: Table unreadable or malformed; nothing was written
            PipelineError: A step failed; nothing was written
        """
        if report is None:
            report = CleaningReport()
        report.source = source or type(table).__name__
        start = time.monotonic()

        try:
            records = table.read_all()
        except Exception as e:
            raise SchemaError(f"Could not read table {report.source}: {e}") from e

        log_run_start(report.run_id, report.source, len(records))

        try:
            cleaned, report = self.clean(records, report)
            if before_write is not None:
                cleaned = before_write(cleaned, report)
            table.write_all(cleaned)
        except Exception:
            report.duration = time.monotonic() - start
            log_run_complete(report.run_id, report.duration, success=False)
            raise

        report.duration = time.monotonic() - start
        log_run_complete(report.run_id, report.duration, success=True, **report.summary())

        return report

    def __call__(self, records: list[Record]) -> list[Record]:
        """Allow pipeline to be called directly on rows."""
        cleaned, _ = self.clean(records)
        return cleaned


def normalize_dates_step(normalizer: DateNormalizer) -> CleaningStep:
    """Sale date -> sale_date_converted; unparseable dates are flagged, not fatal."""

    def apply(records: list[Record], report: CleaningReport) -> None:
        for record in records:
            try:
                record[SALE_DATE_CONVERTED] = normalizer.normalize(record.get(SALE_DATE))
                record[SALE_DATE_WARNING] = False
            except ParseError as e:
                record[SALE_DATE_CONVERTED] = None
                record[SALE_DATE_WARNING] = True
                report.date_parse_failures += 1
                report.add_issue(record.get(UNIQUE_ID), "normalize_dates", "ParseError", str(e))

    return CleaningStep(name="normalize_dates", state=TableState.DATE_NORMALIZED, func=apply)


def impute_addresses_step(imputer: AddressImputer) -> CleaningStep:
    def apply(records: list[Record], report: CleaningReport) -> None:
        report.rows_imputed = len(imputer.impute(records))

    return CleaningStep(name="impute_addresses", state=TableState.ADDRESS_IMPUTED, func=apply)


def split_addresses_step(splitter: AddressSplitter) -> CleaningStep:
    def apply(records: list[Record], report: CleaningReport) -> None:
        warnings = splitter.split(records)
        report.rows_with_split_warnings = len(warnings)
        for unique_id, problems in warnings.items():
            for problem in problems:
                report.add_issue(unique_id, "split_addresses", "MalformedAddress", str(problem))

    return CleaningStep(name="split_addresses", state=TableState.ADDRESS_SPLIT, func=apply)


def normalize_vacant_step(normalizer: CategoricalNormalizer) -> CleaningStep:
    def apply(records: list[Record], report: CleaningReport) -> None:
        # Raw code distribution, nulls not counted
        counts = Counter(
            record.get(SOLD_AS_VACANT) for record in records if record.get(SOLD_AS_VACANT) is not None
        )
        report.vacant_code_counts = dict(
            sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))
        )

        for record in records:
            record[SOLD_AS_VACANT_CLEANED] = normalizer.normalize(record.get(SOLD_AS_VACANT))

    return CleaningStep(
        name="normalize_sold_as_vacant", state=TableState.CATEGORICAL_NORMALIZED, func=apply
    )


def detect_duplicates_step(detector: DuplicateDetector) -> CleaningStep:
    """Duplicates are reported; the rows stay in the table."""

    def apply(records: list[Record], report: CleaningReport) -> None:
        result = detector.detect(records)
        report.duplicate_group_count = result.group_count
        report.duplicate_row_count = result.row_count
        report.duplicates = [dict(record) for record in result.duplicates]

    return CleaningStep(
        name="detect_duplicates", state=TableState.DUPLICATES_IDENTIFIED, func=apply
    )


def prune_columns_step(pruner: ColumnPruner) -> CleaningStep:
    def apply(records: list[Record], report: CleaningReport) -> None:
        report.dropped_columns = pruner.prune(records)

    return CleaningStep(name="prune_columns", state=TableState.PRUNED, func=apply)


def create_housing_pipeline(config: CleaningConfig | None = None) -> CleaningPipeline:
    """Create the standard pipeline for Nashville housing sales.

    Args:
        config: Cleaning options (defaults when omitted)

    Returns:
        Configured CleaningPipeline
    """
    config = config or CleaningConfig()

    required = REQUIRED_COLUMNS
    if config.drop_columns_after_split:
        required = REQUIRED_COLUMNS + (TAX_DISTRICT,)

    pipeline = CleaningPipeline(name="housing", required_columns=required)

    pipeline.add_step(normalize_dates_step(DateNormalizer(config.date_input_formats)))
    pipeline.add_step(impute_addresses_step(AddressImputer()))
    pipeline.add_step(split_addresses_step(AddressSplitter(config.address_delimiter)))
    pipeline.add_step(normalize_vacant_step(CategoricalNormalizer(config.vacant_code_map)))
    pipeline.add_step(detect_duplicates_step(DuplicateDetector()))

    if config.drop_columns_after_split:
        pipeline.add_step(prune_columns_step(ColumnPruner()))

    return pipeline
