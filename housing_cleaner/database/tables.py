"""Table backends the pipeline reads from and writes back to."""

import csv
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from sqlalchemy.orm import sessionmaker

from housing_cleaner.cleaning.normalizer import PriceNormalizer
from housing_cleaner.cleaning.records import SALE_PRICE, Record
from housing_cleaner.monitoring.logger import get_logger

from .connection import create_db_engine, get_db_context, get_session_factory, init_db
from .repository import SaleRecordRepository

logger = get_logger(__name__)

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATOR_RE = re.compile(r"[\s\-]+")


def to_column_name(header: str) -> str:
    """Convert a spreadsheet header to a record key.

    "UniqueID " -> "unique_id", "ParcelID" -> "parcel_id",
    "SoldAsVacant" -> "sold_as_vacant".
    """
    name = _SEPARATOR_RE.sub("_", header.strip())
    name = _CAMEL_RE.sub("_", name)
    return re.sub(r"_+", "_", name).lower()


class RecordTable(Protocol):
    """Anything the pipeline can load from and persist to."""

    def read_all(self) -> list[Record]:
        ...

    def write_all(self, records: list[Record]) -> None:
        ...


class InMemoryTable:
    """List-backed table."""

    def __init__(self, records: list[Record] | None = None) -> None:
        self._records = [dict(record) for record in records or []]

    @property
    def records(self) -> list[Record]:
        return self._records

    def read_all(self) -> list[Record]:
        return [dict(record) for record in self._records]

    def write_all(self, records: list[Record]) -> None:
        self._records = [dict(record) for record in records]

    def __len__(self) -> int:
        return len(self._records)


class CsvTable:
    """Flat-file table (e.g. the Nashville housing CSV export)."""

    def __init__(
        self,
        path: str | Path,
        output_path: str | Path | None = None,
        encoding: str = "utf-8",
        price_normalizer: PriceNormalizer | None = None,
    ) -> None:
        """Initialize CSV table.

        Args:
            path: File to read
            output_path: File to write (overwrites path by default)
            encoding: File encoding
            price_normalizer: Coerces sale prices such as "$120,000" to numbers
        """
        self.path = Path(path)
        self.output_path = Path(output_path) if output_path else self.path
        self.encoding = encoding
        self.price_normalizer = price_normalizer or PriceNormalizer()

    def read_all(self) -> list[Record]:
        """Read rows; headers become snake_case keys, empty cells become None."""
        with open(self.path, "r", newline="", encoding=self.encoding) as f:
            reader = csv.reader(f)
            try:
                headers = [to_column_name(h) for h in next(reader)]
            except StopIteration:
                return []

            records = []
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                record: Record = {}
                for name, cell in zip(headers, row):
                    record[name] = cell if cell.strip() else None
                for name in headers[len(row):]:
                    record[name] = None
                if SALE_PRICE in record:
                    record[SALE_PRICE] = self.price_normalizer.normalize(record[SALE_PRICE])
                records.append(record)

        logger.info(f"Read {len(records)} rows from {self.path}")
        return records

    def write_all(self, records: list[Record]) -> None:
        """Write rows atomically; the target is replaced only once fully written."""
        columns: list[str] = []
        for record in records:
            for name in record:
                if name not in columns:
                    columns.append(name)

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.output_path.parent, prefix=f".{self.output_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", newline="", encoding=self.encoding) as f:
                writer = csv.DictWriter(f, fieldnames=columns)
                writer.writeheader()
                for record in records:
                    writer.writerow({k: _format_cell(v) for k, v in record.items()})
            os.replace(tmp_name, self.output_path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(f"Wrote {len(records)} rows to {self.output_path}")


def _format_cell(value: Any) -> Any:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


class SqlTable:
    """Sales table stored through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        """Initialize SQL table.

        Args:
            session_factory: Session factory (configured database by default)
        """
        self.session_factory = session_factory or get_session_factory()

    @classmethod
    def from_url(cls, database_url: str) -> "SqlTable":
        """Connect to a database URL, creating tables if needed."""
        engine = create_db_engine(database_url)
        init_db(engine)
        return cls(get_session_factory(engine))

    def read_all(self) -> list[Record]:
        with get_db_context(self.session_factory) as db:
            return SaleRecordRepository(db).read_all()

    def write_all(self, records: list[Record]) -> None:
        with get_db_context(self.session_factory) as db:
            SaleRecordRepository(db).write_all(records)

    def __len__(self) -> int:
        with get_db_context(self.session_factory) as db:
            return SaleRecordRepository(db).count()
