"""Value normalizers for sale record fields."""

import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from housing_cleaner.core.config import DEFAULT_DATE_FORMATS, DEFAULT_VACANT_CODES
from housing_cleaner.core.exceptions import ParseError
from housing_cleaner.monitoring.logger import get_logger

logger = get_logger(__name__)


class BaseNormalizer(ABC):
    """Base class for normalizers."""

    @abstractmethod
    def normalize(self, value: Any) -> Any:
        """Normalize value.

        Args:
            value: Value to normalize

        Returns:
            Normalized value
        """
        pass

    def __call__(self, value: Any) -> Any:
        """Allow normalizer to be called directly."""
        return self.normalize(value)


class DateNormalizer(BaseNormalizer):
    """Coerces free-form sale dates into calendar dates."""

    def __init__(self, input_formats: list[str] | None = None) -> None:
        """Initialize date normalizer.

        Args:
            input_formats: Accepted formats, tried in order. Nothing outside
                this list is guessed.
        """
        self.input_formats = list(input_formats or DEFAULT_DATE_FORMATS)

    def normalize(self, value: Any) -> date:
        """Normalize date value.

        Args:
            value: Date string, date or datetime

        Returns:
            Calendar date

        Raises:
            ParseError: If the value matches none of the accepted formats
        """
        # datetime is a date subclass, check it first
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        if value is None:
            raise ParseError(value, self.input_formats)

        text = str(value).strip()
        if not text:
            raise ParseError(value, self.input_formats)

        for fmt in self.input_formats:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

        logger.debug(f"Could not parse date: {value}")
        raise ParseError(value, self.input_formats)


class CategoricalNormalizer(BaseNormalizer):
    """Maps abbreviated codes to canonical labels, passing unknown values through."""

    def __init__(self, code_map: dict[str, str] | None = None) -> None:
        """Initialize categorical normalizer.

        Args:
            code_map: Raw code -> canonical label
        """
        self.code_map = dict(DEFAULT_VACANT_CODES if code_map is None else code_map)

    def normalize(self, value: Any) -> Any:
        """Normalize categorical value.

        Args:
            value: Raw code

        Returns:
            Canonical label, or the value unchanged when it has no mapping
        """
        if isinstance(value, str):
            return self.code_map.get(value, value)
        return value


class PriceNormalizer(BaseNormalizer):
    """Normalizer for sale prices exported as text ("$120,000")."""

    def __init__(self, thousand_separator: str = ",", currency_symbol: str = "$") -> None:
        """Initialize price normalizer.

        Args:
            thousand_separator: Character for thousands
            currency_symbol: Symbol stripped before parsing
        """
        self.thousand_separator = thousand_separator
        self.currency_symbol = currency_symbol

    def normalize(self, value: Any) -> float | int | None:
        """Normalize price value.

        Args:
            value: Price string or number

        Returns:
            int for whole amounts, float otherwise, None when no number is present
        """
        if value is None or isinstance(value, bool):
            return None

        if isinstance(value, (int, float)):
            return value

        text = str(value).strip()
        if not text:
            return None

        text = text.replace(self.currency_symbol, "").replace(self.thousand_separator, "")

        match = re.search(r"-?\d+(?:\.\d+)?", text)
        if not match:
            logger.debug(f"Could not parse price: {value}")
            return None

        price = float(match.group())
        if price.is_integer():
            return int(price)
        return price
