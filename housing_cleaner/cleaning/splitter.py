"""Splitting of composite address strings into street/city/state columns."""

from dataclasses import dataclass

from housing_cleaner.core.exceptions import MalformedAddress
from housing_cleaner.monitoring.logger import get_logger

from .records import (
    ADDRESS_SPLIT_WARNING,
    OWNER_ADDRESS,
    OWNER_SPLIT_ADDRESS,
    OWNER_SPLIT_CITY,
    OWNER_SPLIT_STATE,
    PROPERTY_ADDRESS,
    PROPERTY_SPLIT_ADDRESS,
    PROPERTY_SPLIT_CITY,
    UNIQUE_ID,
    Record,
)

logger = get_logger(__name__)


def split_property_address(address: str, delimiter: str = ",") -> tuple[str, str, bool]:
    """Split "street, city" at the first delimiter.

    Args:
        address: Composite property address
        delimiter: Separator between street and city

    Returns:
        (street, city, ok). Both parts are empty when the delimiter is absent.
        ok is False unless exactly one delimiter was found.
    """
    count = address.count(delimiter)
    if count == 0:
        return "", "", False

    street, city = address.split(delimiter, 1)
    return street.strip(), city.strip(), count == 1


def split_owner_address(address: str, delimiter: str = ",") -> tuple[str, str, str, bool]:
    """Split "street, city, state" right to left.

    The last segment is the state and the one before it the city; anything
    left over is the street. Missing leading parts come back empty.

    Args:
        address: Composite owner address
        delimiter: Separator between parts

    Returns:
        (street, city, state, ok). ok is False unless exactly two delimiters
        were found.
    """
    count = address.count(delimiter)
    if count == 0:
        return "", "", "", False

    parts = [part.strip() for part in address.rsplit(delimiter, 2)]
    if len(parts) == 2:
        city, state = parts
        return "", city, state, False

    street, city, state = parts
    return street, city, state, count == 2


def join_property_address(street: str, city: str, delimiter: str = ",") -> str:
    """Rejoin split parts into the canonical "street, city" form."""
    return f"{street}{delimiter} {city}"


@dataclass
class SplitOutcome:
    """Warnings raised while splitting one record."""

    problems: list[MalformedAddress]

    @property
    def ok(self) -> bool:
        return not self.problems


class AddressSplitter:
    """Writes split address columns and flags records whose split was incomplete."""

    def __init__(self, delimiter: str = ",") -> None:
        """Initialize splitter.

        Args:
            delimiter: Address part separator
        """
        self.delimiter = delimiter

    def split_record(self, record: Record) -> SplitOutcome:
        """Split both composite addresses of one record in place.

        Args:
            record: Table row

        Returns:
            SplitOutcome listing malformed addresses (never raised)
        """
        problems: list[MalformedAddress] = []

        property_address = record.get(PROPERTY_ADDRESS)
        if property_address is None:
            record[PROPERTY_SPLIT_ADDRESS] = None
            record[PROPERTY_SPLIT_CITY] = None
        else:
            text = str(property_address)
            street, city, ok = split_property_address(text, self.delimiter)
            record[PROPERTY_SPLIT_ADDRESS] = street
            record[PROPERTY_SPLIT_CITY] = city
            if not ok:
                problems.append(
                    MalformedAddress(PROPERTY_ADDRESS, text, 1, text.count(self.delimiter))
                )

        owner_address = record.get(OWNER_ADDRESS)
        if owner_address is None:
            record[OWNER_SPLIT_ADDRESS] = None
            record[OWNER_SPLIT_CITY] = None
            record[OWNER_SPLIT_STATE] = None
        else:
            text = str(owner_address)
            street, city, state, ok = split_owner_address(text, self.delimiter)
            record[OWNER_SPLIT_ADDRESS] = street
            record[OWNER_SPLIT_CITY] = city
            record[OWNER_SPLIT_STATE] = state
            if not ok:
                problems.append(
                    MalformedAddress(OWNER_ADDRESS, text, 2, text.count(self.delimiter))
                )

        record[ADDRESS_SPLIT_WARNING] = bool(problems)
        return SplitOutcome(problems=problems)

    def split(self, records: list[Record]) -> dict[object, list[MalformedAddress]]:
        """Split every record in place.

        Args:
            records: Table rows

        Returns:
            Mapping of unique id -> malformed addresses, for flagged records only
        """
        warnings: dict[object, list[MalformedAddress]] = {}
        for record in records:
            outcome = self.split_record(record)
            if not outcome.ok:
                warnings[record.get(UNIQUE_ID)] = outcome.problems

        if warnings:
            logger.warning(f"Address split incomplete for {len(warnings)} record(s)")

        return warnings
