"""Repository pattern for database operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from housing_cleaner.cleaning.records import unique_id_key
from housing_cleaner.cleaning.report import CleaningReport
from housing_cleaner.monitoring.logger import get_logger

from .models import Base, CleaningRun, SaleRecord

logger = get_logger(__name__)

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common read operations."""

    def __init__(self, db: Session, model: type[T]) -> None:
        """Initialize repository.

        Args:
            db: Database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def count(self) -> int:
        """Count total records.

        Returns:
            Total count
        """
        stmt = select(func.count()).select_from(self.model)
        return self.db.scalar(stmt) or 0


class SaleRecordRepository(BaseRepository[SaleRecord]):
    """Repository for the sales table."""

    def __init__(self, db: Session) -> None:
        super().__init__(db, SaleRecord)

    def read_all(self) -> list[dict[str, Any]]:
        """Read every row as a record dict ordered by unique id.

        Returns:
            List of records
        """
        rows = self.db.scalars(select(SaleRecord)).all()
        records = [row.to_dict() for row in rows]
        records.sort(key=lambda r: unique_id_key(r.get("unique_id")))
        return records

    def bulk_load(self, records: list[dict[str, Any]]) -> int:
        """Insert records without touching existing rows.

        Args:
            records: Records to insert

        Returns:
            Number of rows inserted
        """
        self.db.add_all(SaleRecord.from_dict(record) for record in records)
        self.db.commit()
        logger.info(f"Loaded {len(records)} sale records")
        return len(records)

    def write_all(self, records: list[dict[str, Any]]) -> int:
        """Replace the table contents in one transaction.

        Columns missing from a record (e.g. pruned ones) are stored as NULL.

        Args:
            records: Full table contents

        Returns:
            Number of rows written
        """
        try:
            self.db.execute(delete(SaleRecord))
            self.db.add_all(SaleRecord.from_dict(record) for record in records)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Sales table rewritten | rows={len(records)}")
        return len(records)


class CleaningRunRepository(BaseRepository[CleaningRun]):
    """Repository for CleaningRun operations."""

    def __init__(self, db: Session) -> None:
        super().__init__(db, CleaningRun)

    def record_run(
        self, report: CleaningReport, success: bool = True, error: str | None = None
    ) -> CleaningRun:
        """Persist a run report.

        Args:
            report: Report of the run
            success: Whether the table was written
            error: Error message if the run failed

        Returns:
            Created run
        """
        run = CleaningRun(
            id=report.run_id,
            source=report.source,
            success=success,
            final_state=report.final_state.value,
            rows_processed=report.rows_processed,
            rows_imputed=report.rows_imputed,
            rows_with_split_warnings=report.rows_with_split_warnings,
            duplicate_group_count=report.duplicate_group_count,
            duplicate_row_count=report.duplicate_row_count,
            date_parse_failures=report.date_parse_failures,
            duplicate_ids=report.duplicate_ids,
            issues=[issue.to_dict() for issue in report.issues],
            error_message=error,
            started_at=report.started_at,
            duration=report.duration,
        )
        self.db.add(run)
        self.db.commit()
        self.db.refresh(run)
        return run

    def get_recent(self, limit: int = 10) -> list[CleaningRun]:
        """Get most recent runs.

        Args:
            limit: Maximum number of runs

        Returns:
            List of runs, newest first
        """
        stmt = select(CleaningRun).order_by(CleaningRun.started_at.desc()).limit(limit)
        return list(self.db.scalars(stmt).all())
