"""Tests for address splitting."""

import pytest

from housing_cleaner.cleaning.splitter import (
    AddressSplitter,
    join_property_address,
    split_owner_address,
    split_property_address,
)


class TestSplitPropertyAddress:
    """Tests for split_property_address."""

    def test_street_and_city(self):
        """Test basic split."""
        assert split_property_address("1808  FOX CHASE DR, GOODLETTSVILLE") == (
            "1808  FOX CHASE DR",
            "GOODLETTSVILLE",
            True,
        )

    def test_missing_delimiter(self):
        """Test empty output without a delimiter."""
        assert split_property_address("NO DELIMITER") == ("", "", False)

    def test_extra_delimiter(self):
        """Test split at the first delimiter, flagged."""
        street, city, ok = split_property_address("Unit 4, 12 Elm St, Nashville")
        assert street == "Unit 4"
        assert city == "12 Elm St, Nashville"
        assert ok is False

    def test_custom_delimiter(self):
        """Test configured delimiter."""
        assert split_property_address("12 Elm St; Nashville", ";") == ("12 Elm St", "Nashville", True)

    @pytest.mark.parametrize(
        "address",
        [
            "123 Main, Nashville",
            "1808  FOX CHASE DR, GOODLETTSVILLE",
            "0 ROBERTSON RD, NASHVILLE",
        ],
    )
    def test_rejoin_reconstructs(self, address):
        """Test split then rejoin gives the original canonical address."""
        street, city, ok = split_property_address(address)
        assert ok
        assert join_property_address(street, city) == address


class TestSplitOwnerAddress:
    """Tests for split_owner_address."""

    def test_street_city_state(self):
        """Test three-part owner address."""
        assert split_owner_address("123 Main St, Nashville, TN") == (
            "123 Main St",
            "Nashville",
            "TN",
            True,
        )

    def test_missing_delimiter(self):
        """Test empty output without a delimiter."""
        assert split_owner_address("UNKNOWN") == ("", "", "", False)

    def test_two_parts_fill_from_right(self):
        """Test state and city are taken from the right."""
        assert split_owner_address("Nashville, TN") == ("", "Nashville", "TN", False)

    def test_extra_parts_stay_in_street(self):
        """Test leftover segments stay in the street."""
        street, city, state, ok = split_owner_address("Apt 2, 5 Oak Ave, Antioch, TN")
        assert street == "Apt 2, 5 Oak Ave"
        assert city == "Antioch"
        assert state == "TN"
        assert ok is False


class TestAddressSplitter:
    """Tests for AddressSplitter."""

    def test_split_record(self, make_record):
        """Test split columns written to the record."""
        record = make_record(
            "1",
            property_address="123 Main St, Nashville",
            owner_address="123 Main St, Nashville, TN",
        )

        outcome = AddressSplitter().split_record(record)

        assert outcome.ok
        assert record["property_split_address"] == "123 Main St"
        assert record["property_split_city"] == "Nashville"
        assert record["owner_split_address"] == "123 Main St"
        assert record["owner_split_city"] == "Nashville"
        assert record["owner_split_state"] == "TN"
        assert record["address_split_warning"] is False
        # Source columns untouched
        assert record["property_address"] == "123 Main St, Nashville"

    def test_malformed_flagged_not_raised(self, make_record):
        """Test malformed addresses give empty parts and a warning flag."""
        record = make_record("1", property_address="NO DELIMITER", owner_address="ALSO NONE")

        outcome = AddressSplitter().split_record(record)

        assert not outcome.ok
        assert len(outcome.problems) == 2
        assert record["property_split_address"] == ""
        assert record["property_split_city"] == ""
        assert record["owner_split_state"] == ""
        assert record["address_split_warning"] is True

    def test_null_addresses(self, make_record):
        """Test null addresses give null parts without a warning."""
        record = make_record("1", property_address=None, owner_address=None)

        outcome = AddressSplitter().split_record(record)

        assert outcome.ok
        assert record["property_split_address"] is None
        assert record["owner_split_city"] is None
        assert record["address_split_warning"] is False

    def test_split_batch(self, make_record):
        """Test warnings are keyed by unique id."""
        records = [
            make_record("1"),
            make_record("2", property_address="NO DELIMITER"),
        ]

        warnings = AddressSplitter().split(records)

        assert list(warnings) == ["2"]
        assert warnings["2"][0].field == "property_address"
        assert warnings["2"][0].found == 0

    def test_custom_delimiter(self, make_record):
        """Test splitter honours the configured delimiter."""
        record = make_record(
            "1", property_address="12 Elm St|Nashville", owner_address="12 Elm St|Nashville|TN"
        )

        AddressSplitter(delimiter="|").split_record(record)

        assert record["property_split_city"] == "Nashville"
        assert record["owner_split_state"] == "TN"
