"""Run summary and per-record issues collected by the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from tabulate import tabulate

from .records import Record


class TableState(str, Enum):
    """States a table passes through, in order."""

    RAW = "raw"
    DATE_NORMALIZED = "date_normalized"
    ADDRESS_IMPUTED = "address_imputed"
    ADDRESS_SPLIT = "address_split"
    CATEGORICAL_NORMALIZED = "categorical_normalized"
    DUPLICATES_IDENTIFIED = "duplicates_identified"
    PRUNED = "pruned"


@dataclass
class RecordIssue:
    """A problem with one record that did not stop the run."""

    unique_id: Any
    step: str
    kind: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "unique_id": self.unique_id,
            "step": self.step,
            "kind": self.kind,
            "message": self.message,
        }


@dataclass
class CleaningReport:
    """Summary of a cleaning run."""

    run_id: str = field(default_factory=lambda: str(uuid4()))
    source: str = "records"
    rows_processed: int = 0
    rows_imputed: int = 0
    rows_with_split_warnings: int = 0
    duplicate_group_count: int = 0
    duplicate_row_count: int = 0
    date_parse_failures: int = 0
    vacant_code_counts: dict[Any, int] = field(default_factory=dict)
    duplicates: list[Record] = field(default_factory=list)
    issues: list[RecordIssue] = field(default_factory=list)
    dropped_columns: list[str] = field(default_factory=list)
    final_state: TableState = TableState.RAW
    started_at: datetime = field(default_factory=datetime.utcnow)
    duration: float = 0.0

    def add_issue(self, unique_id: Any, step: str, kind: str, message: str) -> None:
        """Record a per-record issue."""
        self.issues.append(RecordIssue(unique_id, step, kind, message))

    @property
    def duplicate_ids(self) -> list[Any]:
        return [record.get("unique_id") for record in self.duplicates]

    def issues_for(self, kind: str) -> list[RecordIssue]:
        """Get issues of one kind (e.g. "ParseError")."""
        return [issue for issue in self.issues if issue.kind == kind]

    def summary(self) -> dict[str, int]:
        """Counters returned by a run."""
        return {
            "rows_processed": self.rows_processed,
            "rows_imputed": self.rows_imputed,
            "rows_with_split_warnings": self.rows_with_split_warnings,
            "duplicate_group_count": self.duplicate_group_count,
            "duplicate_row_count": self.duplicate_row_count,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "run_id": self.run_id,
            "source": self.source,
            **self.summary(),
            "date_parse_failures": self.date_parse_failures,
            "vacant_code_counts": self.vacant_code_counts,
            "duplicate_ids": self.duplicate_ids,
            "issues": [issue.to_dict() for issue in self.issues],
            "dropped_columns": self.dropped_columns,
            "final_state": self.final_state.value,
            "started_at": self.started_at.isoformat(),
            "duration": self.duration,
        }


def format_report(report: CleaningReport, show_duplicates: bool = False) -> str:
    """Render a report as text tables.

    Args:
        report: Completed run report
        show_duplicates: Also list the duplicate records

    Returns:
        Printable text
    """
    rows = [[name, value] for name, value in report.summary().items()]
    rows.append(["date_parse_failures", report.date_parse_failures])
    rows.append(["final_state", report.final_state.value])
    rows.append(["duration", f"{report.duration:.2f}s"])

    text = tabulate(rows, headers=["Metric", "Value"], tablefmt="grid")

    if report.vacant_code_counts:
        text += "\n\n" + tabulate(
            list(report.vacant_code_counts.items()),
            headers=["SoldAsVacant", "Count"],
            tablefmt="grid",
        )

    if show_duplicates and report.duplicates:
        dup_rows = [
            [
                record.get("unique_id"),
                record.get("parcel_id"),
                record.get("property_address"),
                record.get("sale_date"),
                record.get("sale_price"),
                record.get("legal_reference"),
            ]
            for record in report.duplicates
        ]
        text += "\n\n" + tabulate(
            dup_rows,
            headers=["UniqueID", "ParcelID", "PropertyAddress", "SaleDate", "SalePrice", "LegalReference"],
            tablefmt="grid",
        )

    return text
