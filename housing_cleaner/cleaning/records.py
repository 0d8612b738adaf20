"""Column names and small helpers shared by the cleaning steps."""

from typing import Any

Record = dict[str, Any]

# Raw columns
PARCEL_ID = "parcel_id"
UNIQUE_ID = "unique_id"
PROPERTY_ADDRESS = "property_address"
OWNER_ADDRESS = "owner_address"
SALE_DATE = "sale_date"
SALE_PRICE = "sale_price"
SOLD_AS_VACANT = "sold_as_vacant"
LEGAL_REFERENCE = "legal_reference"
TAX_DISTRICT = "tax_district"

# Derived columns
SALE_DATE_CONVERTED = "sale_date_converted"
SALE_DATE_WARNING = "sale_date_warning"
SOLD_AS_VACANT_CLEANED = "sold_as_vacant_cleaned"
PROPERTY_SPLIT_ADDRESS = "property_split_address"
PROPERTY_SPLIT_CITY = "property_split_city"
OWNER_SPLIT_ADDRESS = "owner_split_address"
OWNER_SPLIT_CITY = "owner_split_city"
OWNER_SPLIT_STATE = "owner_split_state"
ADDRESS_SPLIT_WARNING = "address_split_warning"

REQUIRED_COLUMNS = (
    UNIQUE_ID,
    PARCEL_ID,
    PROPERTY_ADDRESS,
    OWNER_ADDRESS,
    SALE_DATE,
    SALE_PRICE,
    SOLD_AS_VACANT,
    LEGAL_REFERENCE,
)

DUPLICATE_KEY_FIELDS = (PARCEL_ID, PROPERTY_ADDRESS, SALE_PRICE, SALE_DATE, LEGAL_REFERENCE)

SUPERSEDED_COLUMNS = (OWNER_ADDRESS, TAX_DISTRICT, PROPERTY_ADDRESS, SALE_DATE)


def unique_id_key(value: Any) -> tuple[int, int, str]:
    """Sort key ordering numeric ids numerically, ahead of other ids.

    "9" sorts before "10"; "A-2" sorts after every numeric id.
    """
    if isinstance(value, bool):
        return (1, 0, str(value))
    if isinstance(value, int):
        return (0, value, "")
    text = "" if value is None else str(value).strip()
    try:
        return (0, int(text), "")
    except ValueError:
        return (1, 0, text)


def is_missing(value: Any) -> bool:
    """True for None and blank strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
