"""Integration tests for the command line entry point."""

import csv

import pytest

import housing_cleaner.__main__ as cli
from housing_cleaner.__main__ import main
from housing_cleaner.cleaning import CleaningStep, TableState, create_housing_pipeline
from housing_cleaner.database.connection import (
    create_db_engine,
    get_db_context,
    get_session_factory,
    init_db,
)
from housing_cleaner.database.repository import CleaningRunRepository, SaleRecordRepository

HEADERS = [
    "UniqueID ",
    "ParcelID",
    "LandUse",
    "PropertyAddress",
    "SaleDate",
    "SalePrice",
    "LegalReference",
    "SoldAsVacant",
    "OwnerName",
    "OwnerAddress",
    "Acreage",
    "TaxDistrict",
]

ROWS = [
    ["2045", "007 00 0 125.00", "SINGLE FAMILY", "1808  FOX CHASE DR, GOODLETTSVILLE",
     "April 9, 2013", "$240,000", "20130412-0036474", "No", "FRAZIER, CYRENTHA LYNETTE",
     "1808  FOX CHASE DR, GOODLETTSVILLE, TN", "2.3", "GENERAL SERVICES DISTRICT"],
    ["16918", "007 00 0 125.00", "SINGLE FAMILY", "", "June 10, 2014", "366000",
     "20140619-0053768", "N", "BONER, CHARLES & LESLIE", "1832  FOX CHASE DR, GOODLETTSVILLE, TN",
     "3.5", "GENERAL SERVICES DISTRICT"],
    ["54582", "007 00 0 130.00", "SINGLE FAMILY", "1832  FOX CHASE DR, GOODLETTSVILLE",
     "September 26, 2016", "435000", "20160927-0101718", "Y", "WILSON, JAMES E. & JOANNE",
     "1832  FOX CHASE DR, GOODLETTSVILLE, TN", "2.9", "GENERAL SERVICES DISTRICT"],
    ["54583", "007 00 0 130.00", "SINGLE FAMILY", "1832  FOX CHASE DR, GOODLETTSVILLE",
     "September 26, 2016", "435000", "20160927-0101718", "Yes", "WILSON, JAMES E. & JOANNE",
     "1832  FOX CHASE DR, GOODLETTSVILLE, TN", "2.9", "GENERAL SERVICES DISTRICT"],
]


def _write_csv(path, headers=HEADERS, rows=ROWS):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        writer.writerows(rows)


def _read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


@pytest.fixture
def sales_csv(tmp_path):
    path = tmp_path / "nashville_housing.csv"
    _write_csv(path)
    return path


class TestCsvCommand:
    """Tests for cleaning a CSV file."""

    def test_clean_csv(self, sales_csv, tmp_path, capsys):
        """Test default run writes the pruned table and prints a report."""
        output = tmp_path / "cleaned.csv"

        assert main(["--csv", str(sales_csv), "--output", str(output)]) == 0

        rows = _read_csv(output)
        assert len(rows) == 4
        header = list(rows[0].keys())
        assert "property_address" not in header
        assert "tax_district" not in header
        assert "property_split_city" in header
        assert "owner_split_state" in header

        by_id = {row["unique_id"]: row for row in rows}
        assert by_id["16918"]["property_split_address"] == "1808  FOX CHASE DR"
        assert by_id["16918"]["sold_as_vacant"] == "No"
        assert by_id["2045"]["sale_price"] == "240000"
        assert by_id["2045"]["sale_date_converted"] == "2013-04-09"

        out = capsys.readouterr().out
        assert "rows_processed" in out
        assert "duplicate_row_count" in out

    def test_source_left_alone_with_output(self, sales_csv, tmp_path):
        """Test the input file is not rewritten when --output is given."""
        before = sales_csv.read_text(encoding="utf-8")

        main(["--csv", str(sales_csv), "--output", str(tmp_path / "cleaned.csv")])

        assert sales_csv.read_text(encoding="utf-8") == before

    def test_keep_columns(self, sales_csv, tmp_path):
        """Test raw columns retained with --keep-columns."""
        output = tmp_path / "cleaned.csv"

        assert main(["--csv", str(sales_csv), "--output", str(output), "--keep-columns"]) == 0

        header = list(_read_csv(output)[0].keys())
        assert "property_address" in header
        assert "sold_as_vacant_cleaned" in header

    def test_remove_duplicates(self, sales_csv, tmp_path, capsys):
        """Test reported duplicates deleted with --remove-duplicates."""
        output = tmp_path / "cleaned.csv"

        assert main(
            ["--csv", str(sales_csv), "--output", str(output), "--remove-duplicates", "--show-duplicates"]
        ) == 0

        ids = [row["unique_id"] for row in _read_csv(output)]
        assert ids == ["2045", "16918", "54582"]
        assert "54583" in capsys.readouterr().out

    def test_missing_column_fails(self, tmp_path, capsys):
        """Test schema problems exit non-zero without writing."""
        source = tmp_path / "bad.csv"
        output = tmp_path / "cleaned.csv"
        _write_csv(source, HEADERS[:-1], [row[:-1] for row in ROWS])

        assert main(["--csv", str(source), "--output", str(output)]) == 1

        assert not output.exists()
        assert "tax_district" in capsys.readouterr().err


class TestDatabaseCommand:
    """Tests for cleaning the database table."""

    def test_clean_database(self, tmp_path, make_record):
        """Test run against SQLite and the recorded run summary."""
        url = f"sqlite:///{tmp_path / 'housing.db'}"
        engine = create_db_engine(url)
        init_db(engine)
        factory = get_session_factory(engine)
        with get_db_context(factory) as db:
            # "1" becomes identical to "3" once its address is imputed
            SaleRecordRepository(db).bulk_load(
                [
                    make_record("1", property_address=None),
                    make_record("2", legal_reference="20140619-0053768"),
                    make_record("3"),
                ]
            )

        assert main(["--database-url", url]) == 0

        with get_db_context(factory) as db:
            rows = SaleRecordRepository(db).read_all()
            runs = [run.to_dict() for run in CleaningRunRepository(db).get_recent()]

        assert [row["unique_id"] for row in rows] == ["1", "2", "3"]
        assert rows[0]["property_split_city"] == "GOODLETTSVILLE"
        assert rows[0]["property_address"] is None
        assert len(runs) == 1
        assert runs[0]["success"] is True
        assert runs[0]["rows_imputed"] == 1
        assert runs[0]["duplicate_ids"] == ["3"]

    def test_failed_run_recorded(self, tmp_path, make_record, monkeypatch, capsys):
        """Test a failed database run is recorded and the table left alone."""
        url = f"sqlite:///{tmp_path / 'housing.db'}"
        engine = create_db_engine(url)
        init_db(engine)
        factory = get_session_factory(engine)
        with get_db_context(factory) as db:
            SaleRecordRepository(db).bulk_load([make_record("1", property_address=None), make_record("2")])

        def broken_pipeline(config):
            def explode(records, report):
                raise RuntimeError("disk full")

            pipeline = create_housing_pipeline(config)
            return pipeline.add_step(CleaningStep("explode", TableState.PRUNED, explode))

        monkeypatch.setattr(cli, "create_housing_pipeline", broken_pipeline)

        assert main(["--database-url", url]) == 1

        with get_db_context(factory) as db:
            rows = SaleRecordRepository(db).read_all()
            runs = [run.to_dict() for run in CleaningRunRepository(db).get_recent()]

        assert rows[0]["property_address"] is None
        assert len(runs) == 1
        assert runs[0]["success"] is False
        assert runs[0]["final_state"] == "pruned"
        assert "disk full" in runs[0]["error_message"]
        assert "disk full" in capsys.readouterr().err
