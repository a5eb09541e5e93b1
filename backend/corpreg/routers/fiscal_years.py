import logging

from fastapi import APIRouter, Depends, HTTPException, status

from corpreg.dependencies import get_store, get_validator
from corpreg.schemas.fiscal_year import (
    FieldValidationRequest,
    FiscalYearResponse,
    RowStateResponse,
    RowStatesRequest,
)
from corpreg.schemas.validation import ValidationResult
from corpreg.services.record_store import RecordStore, StorageError
from corpreg.services.validator import Validator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{fiscal_year_id}", response_model=FiscalYearResponse)
def get_fiscal_year(fiscal_year_id: str, store: RecordStore = Depends(get_store)):
    """Get a specific fiscal year"""
    fiscal_year = store.get_fiscal_year(fiscal_year_id)
    if not fiscal_year:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Fiscal year {fiscal_year_id} not found")

    return fiscal_year


@router.delete("/{fiscal_year_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fiscal_year(fiscal_year_id: str, store: RecordStore = Depends(get_store)):
    """Delete one fiscal year row (unknown ids succeed too)"""
    try:
        store.delete_fiscal_year(fiscal_year_id)
    except StorageError as e:
        logger.error(f"Delete failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="삭제 중 오류가 발생했습니다.",
        )
    return None


@router.post("/validate-field", response_model=ValidationResult)
def validate_field(request: FieldValidationRequest, validator: Validator = Depends(get_validator)):
    """Check a single grid field when it loses focus"""
    return validator.validate_row_field(request.row, request.field, request.sibling_rows)


@router.post("/row-states", response_model=list[RowStateResponse])
def row_states(request: RowStatesRequest, validator: Validator = Depends(get_validator)):
    """
    Classify every grid row as empty, partially filled, valid or invalid.

    Each row is checked against the store and against all other rows.
    """
    responses = []
    for index, row in enumerate(request.rows):
        siblings = [other for position, other in enumerate(request.rows) if position != index]
        state, result = validator.row_state(row, request.company_id, siblings)
        responses.append(RowStateResponse(index=index, state=state, result=result))
    return responses
