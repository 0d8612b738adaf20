"""SQLAlchemy ORM models for Housing Cleaner."""

from datetime import date, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SaleRecord(Base):
    """One real-estate sale transaction, raw and derived columns."""

    __tablename__ = "nashville_housing"

    unique_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    parcel_id: Mapped[str] = mapped_column(String(50), index=True)
    land_use: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Raw columns superseded after cleaning
    property_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sale_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tax_district: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Sale
    sale_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    legal_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sold_as_vacant: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Owner and property details
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    acreage: Mapped[float | None] = mapped_column(Float, nullable=True)
    land_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    building_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    full_bath: Mapped[int | None] = mapped_column(Integer, nullable=True)
    half_bath: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Derived by the pipeline
    sale_date_converted: Mapped[date | None] = mapped_column(Date, nullable=True)
    sale_date_warning: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    sold_as_vacant_cleaned: Mapped[str | None] = mapped_column(String(20), nullable=True)
    property_split_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    property_split_city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_split_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_split_city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_split_state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address_split_warning: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    @classmethod
    def column_names(cls) -> list[str]:
        """Get mapped column names in table order."""
        return [column.key for column in cls.__table__.columns]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SaleRecord":
        """Build a row from a record, ignoring keys that are not columns."""
        names = set(cls.column_names())
        values = {k: v for k, v in data.items() if k in names}
        if values.get("unique_id") is not None:
            values["unique_id"] = str(values["unique_id"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {name: getattr(self, name) for name in self.column_names()}


class CleaningRun(Base):
    """Summary of one pipeline run against the database table."""

    __tablename__ = "cleaning_runs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, default=True)
    final_state: Mapped[str] = mapped_column(String(50), nullable=False)

    # Counters
    rows_processed: Mapped[int] = mapped_column(Integer, default=0)
    rows_imputed: Mapped[int] = mapped_column(Integer, default=0)
    rows_with_split_warnings: Mapped[int] = mapped_column(Integer, default=0)
    duplicate_group_count: Mapped[int] = mapped_column(Integer, default=0)
    duplicate_row_count: Mapped[int] = mapped_column(Integer, default=0)
    date_parse_failures: Mapped[int] = mapped_column(Integer, default=0)

    # Details
    duplicate_ids: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    issues: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timing
    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "source": self.source,
            "success": self.success,
            "final_state": self.final_state,
            "rows_processed": self.rows_processed,
            "rows_imputed": self.rows_imputed,
            "rows_with_split_warnings": self.rows_with_split_warnings,
            "duplicate_group_count": self.duplicate_group_count,
            "duplicate_row_count": self.duplicate_row_count,
            "date_parse_failures": self.date_parse_failures,
            "duplicate_ids": self.duplicate_ids,
            "error_message": self.error_message,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "duration": self.duration,
        }
