"""
Validation rules for companies and fiscal year rows.

Every rule returns a ValidationResult; expected input errors are never raised.
Duplicate and overlap rules look at two sources:
- persisted records, through the RecordStore
- sibling rows, i.e. the other rows of the current editing session that may
  not be saved yet

The registration number checksum is a heuristic (all-identical digits and
strictly ascending runs are rejected). It is NOT the statutory check-digit
algorithm for 법인등록번호 and will accept numbers a registry would reject.
"""

import logging
import re
from collections.abc import Iterable
from typing import Optional

from corpreg.schemas.fiscal_year import FiscalYearRow
from corpreg.schemas.validation import ErrorKind, RowState, ValidationResult
from corpreg.services.record_store import RecordStore, parse_compact_date

logger = logging.getLogger(__name__)

COMPANY_NAME_MAX_LENGTH = 100
REMARKS_MAX_LENGTH = 200
REGISTRATION_NUMBER_MIN_LENGTH = 10
REGISTRATION_NUMBER_MAX_LENGTH = 13
FISCAL_YEAR_MIN = 1900
FISCAL_YEAR_MAX = 2100

REGISTRATION_NUMBER_PATTERNS = [
    re.compile(r"[0-9]{3}-[0-9]{2}-[0-9]{5}"),  # XXX-XX-XXXXX
    re.compile(r"[0-9]{10}"),  # XXXXXXXXXX
    re.compile(r"[0-9]{12,13}"),
]
_YEAR_PATTERN = re.compile(r"[0-9]{4}")
_DATE_PATTERN = re.compile(r"[0-9]{8}")
_WHITESPACE = re.compile(r"\s")

START_DATE_LABEL = "시작일"
END_DATE_LABEL = "종료일"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def _required(value: Optional[str], label: str, field: Optional[str] = None) -> Optional[ValidationResult]:
    if _is_blank(value):
        return ValidationResult.fail(ErrorKind.EMPTY, f"{label}은(는) 필수 입력 항목입니다.", field)
    return None


class Validator:
    def __init__(self, store: RecordStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Company
    # -------------------------------------------------------------------------

    def validate_company_name(self, name: Optional[str]) -> ValidationResult:
        missing = _required(name, "법인명", "name")
        if missing:
            return missing

        if len(name) > COMPANY_NAME_MAX_LENGTH:
            return ValidationResult.fail(
                ErrorKind.TOO_LONG,
                f"법인명은 입력 가능한 최대 길이를 초과했습니다. (최대 {COMPANY_NAME_MAX_LENGTH}자)",
                "name",
            )

        return ValidationResult.ok()

    def validate_registration_number(
        self, raw: Optional[str], current_company_id: Optional[str] = None
    ) -> ValidationResult:
        """
        Syntax first, then the checksum heuristic, then the store lookup.

        The duplicate lookup uses the number exactly as entered.
        """
        field = "registration_number"
        missing = _required(raw, "법인등록번호", field)
        if missing:
            return missing

        cleaned = _WHITESPACE.sub("", raw)

        if not REGISTRATION_NUMBER_MIN_LENGTH <= len(cleaned) <= REGISTRATION_NUMBER_MAX_LENGTH:
            return ValidationResult.fail(
                ErrorKind.LENGTH,
                "법인등록번호는 10자리 이상 13자리 이하로 입력해주세요.",
                field,
            )

        if not any(pattern.fullmatch(cleaned) for pattern in REGISTRATION_NUMBER_PATTERNS):
            return ValidationResult.fail(
                ErrorKind.FORMAT,
                "법인등록번호 형식이 올바르지 않습니다. (예: 123-45-67890 또는 1234567890)",
                field,
            )

        if len(cleaned) >= REGISTRATION_NUMBER_MIN_LENGTH:
            checksum = self.check_registration_checksum(cleaned)
            if not checksum.is_valid:
                return checksum

        if self.store.registration_number_exists(raw, current_company_id):
            return ValidationResult.fail(ErrorKind.DUPLICATE, "이미 등록된 법인등록번호입니다.", field)

        return ValidationResult.ok()

    def check_registration_checksum(self, number: str) -> ValidationResult:
        """Heuristic sanity check, see module docstring"""
        digits = number.replace("-", "")

        if len(set(digits)) == 1:
            return ValidationResult.fail(
                ErrorKind.CHECKSUM,
                "유효하지 않은 법인등록번호입니다. (모든 자리가 동일한 숫자)",
                "registration_number",
            )

        # 9 is followed by 0 so that 1234567890 counts as a run
        if all(int(digits[i]) == (int(digits[i - 1]) + 1) % 10 for i in range(1, len(digits))):
            return ValidationResult.fail(
                ErrorKind.CHECKSUM,
                "유효하지 않은 법인등록번호입니다. (연속된 숫자)",
                "registration_number",
            )

        return ValidationResult.ok()

    # -------------------------------------------------------------------------
    # Fiscal year fields
    # -------------------------------------------------------------------------

    def validate_fiscal_year(self, year: Optional[str]) -> ValidationResult:
        field = "fiscal_year"
        missing = _required(year, "사업연도", field)
        if missing:
            return missing

        if not _YEAR_PATTERN.fullmatch(year):
            return ValidationResult.fail(
                ErrorKind.FORMAT, "사업연도는 4자리 연도(YYYY) 형식으로 입력해주세요.", field
            )

        if not FISCAL_YEAR_MIN <= int(year) <= FISCAL_YEAR_MAX:
            return ValidationResult.fail(
                ErrorKind.RANGE,
                f"사업연도는 {FISCAL_YEAR_MIN}년부터 {FISCAL_YEAR_MAX}년 사이의 값을 입력해주세요.",
                field,
            )

        return ValidationResult.ok()

    def validate_date(self, value: Optional[str], label: str, field: Optional[str] = None) -> ValidationResult:
        """Check a YYYYMMDD value; on success the result carries the parsed date"""
        missing = _required(value, label, field)
        if missing:
            return missing

        if not _DATE_PATTERN.fullmatch(value):
            return ValidationResult.fail(ErrorKind.FORMAT, f"{label}은(는) YYYYMMDD 형식으로 입력해주세요.", field)

        parsed = parse_compact_date(value)
        if parsed is None:
            return ValidationResult.fail(ErrorKind.INVALID_DATE, f"{label}에 올바른 날짜를 입력해주세요.", field)

        return ValidationResult.ok(parsed_date=parsed)

    def validate_date_range(self, start: Optional[str], end: Optional[str]) -> ValidationResult:
        start_result = self.validate_date(start, START_DATE_LABEL, "start_date")
        if not start_result.is_valid:
            return start_result

        end_result = self.validate_date(end, END_DATE_LABEL, "end_date")
        if not end_result.is_valid:
            return end_result

        if start_result.parsed_date > end_result.parsed_date:
            return ValidationResult.fail(
                ErrorKind.RANGE_ORDER, "종료일은 시작일보다 늦어야 합니다.", "end_date"
            )

        return ValidationResult.ok()

    def validate_remarks(self, remarks: Optional[str]) -> ValidationResult:
        if remarks and len(remarks) > REMARKS_MAX_LENGTH:
            return ValidationResult.fail(
                ErrorKind.TOO_LONG,
                f"비고는 입력 가능한 최대 길이를 초과했습니다. (최대 {REMARKS_MAX_LENGTH}자)",
                "remarks",
            )
        return ValidationResult.ok()

    # -------------------------------------------------------------------------
    # Session siblings
    # -------------------------------------------------------------------------

    def check_session_duplicate(
        self, year: str, exclude_id: Optional[str], sibling_rows: Iterable[FiscalYearRow]
    ) -> ValidationResult:
        for sibling in sibling_rows:
            if exclude_id and sibling.id == exclude_id:
                continue
            if sibling.fiscal_year and sibling.fiscal_year == year:
                return ValidationResult.fail(
                    ErrorKind.DUPLICATE_YEAR_IN_SESSION,
                    f"사업연도 {year}이(가) 현재 화면에서 중복됩니다.",
                    "fiscal_year",
                )
        return ValidationResult.ok()

    def check_session_overlap(
        self, start: str, end: str, exclude_id: Optional[str], sibling_rows: Iterable[FiscalYearRow]
    ) -> ValidationResult:
        new_start = parse_compact_date(start)
        new_end = parse_compact_date(end)
        if new_start is None or new_end is None:
            return ValidationResult.ok()

        for sibling in sibling_rows:
            if exclude_id and sibling.id == exclude_id:
                continue
            if not sibling.start_date or not sibling.end_date:
                continue

            other_start = parse_compact_date(sibling.start_date)
            other_end = parse_compact_date(sibling.end_date)
            if other_start is None or other_end is None:
                continue

            if new_start <= other_end and new_end >= other_start:
                return ValidationResult.fail(
                    ErrorKind.DATE_OVERLAP_IN_SESSION,
                    f"입력한 기간({start}~{end})이 현재 화면의 다른 사업연도"
                    f"({sibling.start_date}~{sibling.end_date})와 겹칩니다.",
                    "start_date",
                )
        return ValidationResult.ok()

    # -------------------------------------------------------------------------
    # Whole row
    # -------------------------------------------------------------------------

    def validate_fiscal_year_data(
        self,
        candidate: FiscalYearRow,
        company_id: Optional[str],
        current_fiscal_year_id: Optional[str] = None,
        sibling_rows: Iterable[FiscalYearRow] = (),
    ) -> ValidationResult:
        """
        Run every fiscal year rule in order and stop at the first failure:
        year format, date range, stored duplicate year, session duplicate
        year, stored overlap, session overlap and finally start == end.

        Rows whose key fields are all blank must be skipped by the caller.
        """
        siblings = list(sibling_rows)

        result = self.validate_fiscal_year(candidate.fiscal_year)
        if not result.is_valid:
            return result

        result = self.validate_date_range(candidate.start_date, candidate.end_date)
        if not result.is_valid:
            return result

        if company_id and self.store.fiscal_year_exists(company_id, candidate.fiscal_year, current_fiscal_year_id):
            return ValidationResult.fail(
                ErrorKind.DUPLICATE_YEAR,
                f"사업연도 {candidate.fiscal_year}은(는) 이미 등록되어 있습니다.",
                "fiscal_year",
            )

        result = self.check_session_duplicate(candidate.fiscal_year, current_fiscal_year_id, siblings)
        if not result.is_valid:
            return result

        if company_id:
            overlap = self.store.date_overlap(
                company_id, candidate.start_date, candidate.end_date, current_fiscal_year_id
            )
            if overlap.is_overlap:
                return ValidationResult.fail(
                    ErrorKind.DATE_OVERLAP,
                    f"입력한 기간({candidate.start_date}~{candidate.end_date})이 기존 사업연도 "
                    f"{overlap.conflict_fiscal_year}({overlap.conflict_period})와 겹칩니다.",
                    "start_date",
                )

        result = self.check_session_overlap(
            candidate.start_date, candidate.end_date, current_fiscal_year_id, siblings
        )
        if not result.is_valid:
            return result

        # The range check above lets a single-day period through
        if candidate.start_date == candidate.end_date:
            return ValidationResult.fail(ErrorKind.RANGE_ORDER, "시작일은 종료일보다 빨라야 합니다.", "end_date")

        return ValidationResult.ok()

    def validate_row_field(
        self, row: FiscalYearRow, field: str, sibling_rows: Iterable[FiscalYearRow] = ()
    ) -> ValidationResult:
        """
        Check the one field that just lost focus. Blank values pass; the
        full check happens on save.
        """
        siblings = list(sibling_rows)
        value = getattr(row, field, "")
        if not value:
            return ValidationResult.ok()

        if field == "fiscal_year":
            result = self.validate_fiscal_year(value)
            if not result.is_valid:
                return result
            return self.check_session_duplicate(value, row.id, siblings)

        if field in ("start_date", "end_date"):
            label = START_DATE_LABEL if field == "start_date" else END_DATE_LABEL
            result = self.validate_date(value, label, field)
            if not result.is_valid or not (row.start_date and row.end_date):
                return result

            result = self.validate_date_range(row.start_date, row.end_date)
            if not result.is_valid:
                return result
            return self.check_session_overlap(row.start_date, row.end_date, row.id, siblings)

        if field == "remarks":
            return self.validate_remarks(value)

        logger.debug(f"No field rule for '{field}'")
        return ValidationResult.ok()

    def row_state(
        self,
        row: FiscalYearRow,
        company_id: Optional[str],
        sibling_rows: Iterable[FiscalYearRow] = (),
    ) -> tuple[RowState, Optional[ValidationResult]]:
        """
        Where a grid row stands: empty, partially filled, valid or invalid.

        A partially filled row gets the per-field checks for the fields it
        has; the store checks wait until all three key fields are filled.
        """
        siblings = list(sibling_rows)
        if row.is_blank:
            return RowState.EMPTY, None

        if not (row.fiscal_year and row.start_date and row.end_date):
            for field in ("fiscal_year", "start_date", "end_date", "remarks"):
                result = self.validate_row_field(row, field, siblings)
                if not result.is_valid:
                    return RowState.INVALID, result
            return RowState.PARTIALLY_FILLED, None

        result = self.validate_fiscal_year_data(row, company_id, row.id, siblings)
        if not result.is_valid:
            return RowState.INVALID, result

        result = self.validate_remarks(row.remarks)
        return (RowState.VALID if result.is_valid else RowState.INVALID), result
