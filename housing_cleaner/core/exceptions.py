"""Error types raised while cleaning a sales table."""

from typing import Any


class CleaningError(Exception):
    """Base class for cleaning errors."""


class ParseError(CleaningError):
    """A sale date matched none of the accepted input formats."""

    def __init__(self, value: Any, formats: list[str] | None = None) -> None:
        self.value = value
        self.formats = list(formats or [])
        super().__init__(f"Could not parse date: {value!r}")


class MalformedAddress(CleaningError):
    """A composite address had a missing or unexpected delimiter count."""

    def __init__(self, field: str, value: str, expected: int, found: int) -> None:
        self.field = field
        self.value = value
        self.expected = expected
        self.found = found
        super().__init__(
            f"Malformed {field}: expected {expected} delimiter(s), found {found} in {value!r}"
        )


class SchemaError(CleaningError):
    """The input table cannot be cleaned at all (missing column, duplicate id)."""


class PipelineError(CleaningError):
    """A step failed; the table was left untouched."""

    def __init__(self, step: str, state: Any, cause: Exception) -> None:
        self.step = step
        self.state = state
        self.cause = cause
        super().__init__(f"Step '{step}' failed after state {state}: {cause}")
