import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, enum.Enum):
    """Kinds of user-input errors reported by the validator"""

    EMPTY = "EMPTY"
    FORMAT = "FORMAT"
    LENGTH = "LENGTH"
    TOO_LONG = "TOO_LONG"
    RANGE = "RANGE"
    RANGE_ORDER = "RANGE_ORDER"
    INVALID_DATE = "INVALID_DATE"
    CHECKSUM = "CHECKSUM"
    DUPLICATE = "DUPLICATE"  # registration number
    DUPLICATE_YEAR = "DUPLICATE_YEAR"
    DUPLICATE_YEAR_IN_SESSION = "DUPLICATE_YEAR_IN_SESSION"
    DATE_OVERLAP = "DATE_OVERLAP"
    DATE_OVERLAP_IN_SESSION = "DATE_OVERLAP_IN_SESSION"


class RowState(str, enum.Enum):
    """State of a fiscal year row in an editing session"""

    EMPTY = "empty"
    PARTIALLY_FILLED = "partially_filled"
    VALID = "valid"
    INVALID = "invalid"


class ValidationResult(BaseModel):
    """Outcome of a single validation rule"""

    is_valid: bool = True
    kind: Optional[ErrorKind] = None
    message: str = ""
    field: Optional[str] = None
    parsed_date: Optional[date] = None

    @classmethod
    def ok(cls, parsed_date: Optional[date] = None) -> "ValidationResult":
        return cls(is_valid=True, parsed_date=parsed_date)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, field: Optional[str] = None) -> "ValidationResult":
        return cls(is_valid=False, kind=kind, message=message, field=field)

    def __bool__(self) -> bool:
        return self.is_valid


class DateOverlap(BaseModel):
    """Result of scanning persisted fiscal years for a conflicting period"""

    is_overlap: bool = False
    conflict_fiscal_year: Optional[str] = None
    conflict_period: Optional[str] = None
