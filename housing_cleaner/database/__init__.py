"""Database module - Models, Repository, Connection management, Table backends."""

from .connection import get_db_context, get_engine, init_db
from .models import Base, CleaningRun, SaleRecord
from .repository import CleaningRunRepository, SaleRecordRepository
from .tables import CsvTable, InMemoryTable, RecordTable, SqlTable

__all__ = [
    "Base",
    "SaleRecord",
    "CleaningRun",
    "SaleRecordRepository",
    "CleaningRunRepository",
    "RecordTable",
    "InMemoryTable",
    "CsvTable",
    "SqlTable",
    "get_engine",
    "get_db_context",
    "init_db",
]
