"""Final removal of raw columns replaced by derived ones."""

from housing_cleaner.monitoring.logger import get_logger

from .records import SOLD_AS_VACANT, SOLD_AS_VACANT_CLEANED, SUPERSEDED_COLUMNS, Record

logger = get_logger(__name__)


class ColumnPruner:
    """Drops superseded columns from every record.

    This is one-way: snapshot the table first if the raw values may be needed.
    The cleaned SoldAsVacant label replaces the raw code in the same pass.
    """

    def __init__(
        self,
        columns: tuple[str, ...] | list[str] = SUPERSEDED_COLUMNS,
        promote: dict[str, str] | None = None,
    ) -> None:
        """Initialize pruner.

        Args:
            columns: Columns to remove
            promote: Derived column -> raw column it overwrites before removal
        """
        self.columns = tuple(columns)
        self.promote = {SOLD_AS_VACANT_CLEANED: SOLD_AS_VACANT} if promote is None else promote

    def prune_record(self, record: Record) -> Record:
        """Return a pruned copy of a record."""
        pruned = {k: v for k, v in record.items() if k not in self.columns}
        for derived, target in self.promote.items():
            if derived in pruned:
                pruned[target] = pruned.pop(derived)
        return pruned

    def prune(self, records: list[Record]) -> list[str]:
        """Prune every record in place.

        All pruned rows are built before any row is replaced.

        Args:
            records: Table rows

        Returns:
            Columns that were present and have been dropped
        """
        pruned = [self.prune_record(record) for record in records]
        dropped = sorted({c for record in records for c in self.columns if c in record})

        for record, replacement in zip(records, pruned):
            record.clear()
            record.update(replacement)

        logger.info(f"Columns dropped | rows={len(records)} | columns={','.join(dropped)}")

        return dropped
