"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment before settings are loaded
os.environ["APP_ENV"] = "development"
os.environ["DEBUG"] = "true"
os.environ["LOG_TO_FILE"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///./test_data/test.db"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Setup test environment."""
    test_data_dir = project_root / "test_data"
    test_data_dir.mkdir(exist_ok=True)

    yield

    # Cleanup
    import shutil
    if test_data_dir.exists():
        shutil.rmtree(test_data_dir)


def build_record(unique_id, parcel_id="007 00 0 125.00", **overrides):
    """Sale record shaped like a row of the Nashville housing export."""
    record = {
        "unique_id": unique_id,
        "parcel_id": parcel_id,
        "land_use": "SINGLE FAMILY",
        "property_address": "1808  FOX CHASE DR, GOODLETTSVILLE",
        "sale_date": "April 9, 2013",
        "sale_price": 240000,
        "legal_reference": "20130412-0036474",
        "sold_as_vacant": "No",
        "owner_name": "FRAZIER, CYRENTHA LYNETTE",
        "owner_address": "1808  FOX CHASE DR, GOODLETTSVILLE, TN",
        "tax_district": "GENERAL SERVICES DISTRICT",
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_record():
    """Factory for sale records."""
    return build_record


@pytest.fixture
def sample_records():
    """Small table exercising every cleaning step.

    - "1" is missing its address; "2" shares its parcel and has one
    - "5" and "9" are duplicates on the business key
    - "10" has an unparseable date, an address without a delimiter and a
      non-standard vacancy code
    """
    return [
        build_record(
            "1",
            parcel_id="P1",
            property_address=None,
            owner_address="123 Main St, Nashville, TN",
            sale_date="April 9, 2013",
            sale_price=100,
            legal_reference="L1",
            sold_as_vacant="N",
        ),
        build_record(
            "2",
            parcel_id="P1",
            property_address="123 Main St, Nashville",
            owner_address="123 Main St, Nashville, TN",
            sale_date="June 10, 2014",
            sale_price=200,
            legal_reference="L2",
            sold_as_vacant="Y",
        ),
        build_record(
            "5",
            parcel_id="P2",
            property_address="456 Oak Ave, Antioch",
            owner_address="456 Oak Ave, Antioch, TN",
            sale_date="2015-01-02",
            sale_price=150000,
            legal_reference="L5",
            sold_as_vacant="No",
        ),
        build_record(
            "9",
            parcel_id="P2",
            property_address="456 Oak Ave, Antioch",
            owner_address="456 Oak Ave, Antioch, TN",
            sale_date="2015-01-02",
            sale_price=150000,
            legal_reference="L5",
            sold_as_vacant="No",
        ),
        build_record(
            "10",
            parcel_id="P3",
            property_address="NO DELIMITER",
            owner_address=None,
            sale_date="31/31/2015",
            sale_price=50,
            legal_reference="L10",
            sold_as_vacant="Maybe",
        ),
    ]
