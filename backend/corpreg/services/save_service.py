"""
Save a company together with the fiscal year rows of its editing session.

Each row is validated against the store and the other rows right before it
is written. The first invalid row stops the batch; rows written before it
stay written (there is no rollback across the batch).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from corpreg.models.company import Company
from corpreg.models.fiscal_year import FiscalYear
from corpreg.schemas.company import CompanyData, CompanySaveRequest
from corpreg.schemas.fiscal_year import FiscalYearData, FiscalYearRow
from corpreg.schemas.validation import ValidationResult
from corpreg.services.record_store import RecordStore
from corpreg.services.validator import Validator

logger = logging.getLogger(__name__)


@dataclass
class SaveOutcome:
    """Result of a save: either everything was written or the first failure"""

    company: Optional[Company] = None
    fiscal_years: list[FiscalYear] = field(default_factory=list)
    error: Optional[ValidationResult] = None
    row_number: Optional[int] = None  # 1-based position of the failing row

    @property
    def success(self) -> bool:
        return self.error is None


def save_record(store: RecordStore, validator: Validator, request: CompanySaveRequest) -> SaveOutcome:
    """
    Validate and persist the company, then each non-empty row in order.

    Raises:
        StorageError: If a write fails. Earlier writes are kept.
    """
    result = validator.validate_company_name(request.name)
    if not result.is_valid:
        return SaveOutcome(error=result)

    result = validator.validate_registration_number(request.registration_number, request.company_id)
    if not result.is_valid:
        return SaveOutcome(error=result)

    company = store.save_company(
        CompanyData(
            id=request.company_id,
            name=request.name,
            registration_number=request.registration_number,
        )
    )
    if company is None:
        # Stale id from the client: the company was deleted meanwhile
        company = store.save_company(
            CompanyData(name=request.name, registration_number=request.registration_number)
        )

    outcome = SaveOutcome(company=company)
    rows = request.fiscal_years

    for index, row in enumerate(rows):
        if row.is_blank:
            continue

        siblings = [other for position, other in enumerate(rows) if position != index and not other.is_blank]
        result = validator.validate_fiscal_year_data(row, company.id, row.id, siblings)
        if result.is_valid:
            result = validator.validate_remarks(row.remarks)
        if not result.is_valid:
            logger.warning(f"Row {index + 1} of company {company.id} rejected: {result.kind} {result.message}")
            outcome.error = result
            outcome.row_number = index + 1
            return outcome

        saved = store.save_fiscal_year(_row_data(row, company.id))
        if saved is None:
            # Row id no longer exists; store it as a new row
            saved = store.save_fiscal_year(_row_data(row.model_copy(update={"id": None}), company.id))
        outcome.fiscal_years.append(saved)

    logger.info(f"Saved company {company.id} with {len(outcome.fiscal_years)} fiscal years")
    return outcome


def _row_data(row: FiscalYearRow, company_id: str) -> FiscalYearData:
    return FiscalYearData(
        id=row.id,
        company_id=company_id,
        fiscal_year=row.fiscal_year,
        start_date=row.start_date,
        end_date=row.end_date,
        is_main_fiscal_year=row.is_main_fiscal_year,
        remarks=row.remarks,
    )
