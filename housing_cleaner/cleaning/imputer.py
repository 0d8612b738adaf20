"""Property address imputation across records of the same parcel."""

from collections import defaultdict
from typing import Any

from housing_cleaner.monitoring.logger import get_logger

from .records import PARCEL_ID, PROPERTY_ADDRESS, UNIQUE_ID, Record, unique_id_key

logger = get_logger(__name__)


class AddressImputer:
    """Fills null addresses from another sale of the same parcel.

    Donors are taken from a snapshot built before any record is touched, so a
    value imputed in this pass never feeds another record in the same pass.
    Among several donors the one with the smallest unique id wins. Records
    without a parcel id neither give nor receive a value, and only null
    addresses are filled (a blank string is a value).
    """

    def __init__(
        self,
        key_field: str = PARCEL_ID,
        value_field: str = PROPERTY_ADDRESS,
        id_field: str = UNIQUE_ID,
    ) -> None:
        """Initialize imputer.

        Args:
            key_field: Field grouping related records
            value_field: Field to fill in
            id_field: Record identity field
        """
        self.key_field = key_field
        self.value_field = value_field
        self.id_field = id_field

    def build_donors(self, records: list[Record]) -> dict[Any, list[tuple[Any, Any]]]:
        """Snapshot candidate values per group key.

        Args:
            records: Table rows

        Returns:
            Mapping of key -> [(unique_id, value)] sorted by unique id
        """
        donors: dict[Any, list[tuple[Any, Any]]] = defaultdict(list)
        for record in records:
            key = record.get(self.key_field)
            value = record.get(self.value_field)
            if key is None or value is None:
                continue
            donors[key].append((record.get(self.id_field), value))

        for candidates in donors.values():
            candidates.sort(key=lambda item: unique_id_key(item[0]))

        return dict(donors)

    def impute(self, records: list[Record]) -> list[Any]:
        """Fill null values in place.

        Args:
            records: Table rows

        Returns:
            Unique ids of the imputed records
        """
        donors = self.build_donors(records)
        imputed = []
        unresolved = 0

        for record in records:
            if record.get(self.value_field) is not None:
                continue

            key = record.get(self.key_field)
            record_id = record.get(self.id_field)
            candidates = donors.get(key, []) if key is not None else []
            match = next((value for uid, value in candidates if uid != record_id), None)

            if match is None:
                unresolved += 1
                continue

            record[self.value_field] = match
            imputed.append(record_id)

        logger.info(
            f"Address imputation complete | imputed={len(imputed)} | unresolved={unresolved}"
        )

        return imputed
