"""Duplicate sale detection over a business key."""

import hashlib
from dataclasses import dataclass, field
from typing import Any, Iterable

from housing_cleaner.monitoring.logger import get_logger

from .records import DUPLICATE_KEY_FIELDS, UNIQUE_ID, Record, unique_id_key

logger = get_logger(__name__)


@dataclass
class DuplicateGroup:
    """Records sharing one business key, ordered by unique id."""

    key_hash: str
    records: list[Record]

    @property
    def canonical(self) -> Record:
        """The record kept as authoritative (smallest unique id)."""
        return self.records[0]

    @property
    def duplicates(self) -> list[Record]:
        """Every record ranked after the canonical one."""
        return self.records[1:]


@dataclass
class DuplicateResult:
    """Outcome of a detection pass."""

    groups: list[DuplicateGroup] = field(default_factory=list)

    @property
    def duplicates(self) -> list[Record]:
        return [record for group in self.groups for record in group.duplicates]

    @property
    def duplicate_ids(self) -> list[Any]:
        return [record.get(UNIQUE_ID) for record in self.duplicates]

    @property
    def group_count(self) -> int:
        return len(self.groups)

    @property
    def row_count(self) -> int:
        return sum(len(group.duplicates) for group in self.groups)


class DuplicateDetector:
    """Finds redundant sale records without removing them."""

    def __init__(
        self,
        key_fields: tuple[str, ...] | list[str] = DUPLICATE_KEY_FIELDS,
        id_field: str = UNIQUE_ID,
        case_sensitive: bool = True,
    ) -> None:
        """Initialize detector.

        Args:
            key_fields: Fields whose equality defines a duplicate group
            id_field: Field used to rank records inside a group
            case_sensitive: Whether string key values compare case-sensitively
        """
        self.key_fields = tuple(key_fields)
        self.id_field = id_field
        self.case_sensitive = case_sensitive

    def generate_key(self, record: Record) -> tuple[Any, ...]:
        """Build the comparison key for a record.

        Nulls are kept as None so they group with each other.

        Args:
            record: Table row

        Returns:
            Hashable key tuple
        """
        values = []
        for name in self.key_fields:
            value = record.get(name)
            if isinstance(value, str) and not self.case_sensitive:
                value = value.lower()
            values.append(value)
        return tuple(values)

    def generate_hash(self, key: tuple[Any, ...]) -> str:
        """Generate a stable SHA-256 identifier for a key.

        Args:
            key: Key from generate_key

        Returns:
            Hash string
        """
        content = repr(list(zip(self.key_fields, key)))
        return hashlib.sha256(content.encode()).hexdigest()

    def find_groups(self, records: list[Record]) -> list[DuplicateGroup]:
        """Group records by key, keeping groups with more than one member.

        Args:
            records: Table rows

        Returns:
            Duplicate groups in order of first appearance
        """
        buckets: dict[tuple[Any, ...], list[Record]] = {}
        for record in records:
            buckets.setdefault(self.generate_key(record), []).append(record)

        groups = []
        for key, members in buckets.items():
            if len(members) < 2:
                continue
            ordered = sorted(members, key=lambda r: unique_id_key(r.get(self.id_field)))
            groups.append(DuplicateGroup(key_hash=self.generate_hash(key), records=ordered))

        return groups

    def detect(self, records: list[Record]) -> DuplicateResult:
        """Identify duplicates. The table is not modified.

        Args:
            records: Table rows

        Returns:
            DuplicateResult with every group and its ranked members
        """
        result = DuplicateResult(groups=self.find_groups(records))

        logger.info(
            f"Duplicate detection complete | input={len(records)} | "
            f"groups={result.group_count} | duplicates={result.row_count}"
        )

        return result


def remove_duplicates(records: list[Record], duplicate_ids: Iterable[Any]) -> list[Record]:
    """Drop records identified as duplicates.

    Deleting is left to the caller; the pipeline itself only reports.

    Args:
        records: Table rows
        duplicate_ids: Unique ids of non-canonical records (DuplicateResult.duplicate_ids)

    Returns:
        New list without the duplicate records
    """
    doomed = set(duplicate_ids)
    kept = [record for record in records if record.get(UNIQUE_ID) not in doomed]

    logger.info(f"Removed duplicates | input={len(records)} | removed={len(records) - len(kept)}")

    return kept
