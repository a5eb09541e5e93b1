import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from corpreg.dependencies import get_store, get_validator
from corpreg.schemas.company import CompanyDetailResponse, CompanySaveRequest, CompanyResponse, SaveErrorDetail
from corpreg.schemas.fiscal_year import FiscalYearResponse
from corpreg.services import save_service
from corpreg.services.record_store import RecordStore, StorageError
from corpreg.services.validator import Validator

logger = logging.getLogger(__name__)

router = APIRouter()


def _detail(company, store: RecordStore) -> CompanyDetailResponse:
    return CompanyDetailResponse(
        id=company.id,
        name=company.name,
        registration_number=company.registration_number,
        fiscal_years=[FiscalYearResponse.model_validate(fy) for fy in store.fiscal_years_of(company.id)],
    )


@router.get("/", response_model=list[CompanyResponse])
def list_companies(store: RecordStore = Depends(get_store)):
    """List all companies in insertion order"""
    return store.all_companies()


@router.get("/search", response_model=CompanyDetailResponse)
def search_company(
    name: Optional[str] = Query(None, description="법인명"),
    registration_number: Optional[str] = Query(None, description="법인등록번호"),
    store: RecordStore = Depends(get_store),
):
    """Look up a company by name or registration number"""
    name = (name or "").strip()
    registration_number = (registration_number or "").strip()
    if not name and not registration_number:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="법인명 또는 법인등록번호를 입력해주세요.",
        )

    company = store.find_company(name or None, registration_number or None)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="조회된 법인 정보가 없습니다.")

    return _detail(company, store)


@router.get("/{company_id}", response_model=CompanyDetailResponse)
def get_company(company_id: str, store: RecordStore = Depends(get_store)):
    """Get a specific company with its fiscal years"""
    company = store.get_company(company_id)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Company {company_id} not found")

    return _detail(company, store)


@router.get("/{company_id}/fiscal-years", response_model=list[FiscalYearResponse])
def list_fiscal_years(company_id: str, store: RecordStore = Depends(get_store)):
    """List fiscal years of a company in insertion order"""
    return store.fiscal_years_of(company_id)


@router.post("/save", response_model=CompanyDetailResponse)
def save_company(
    request: CompanySaveRequest,
    store: RecordStore = Depends(get_store),
    validator: Validator = Depends(get_validator),
):
    """
    Save the company form and every fiscal year row of the grid.

    Rows are validated and written one by one; the first invalid row stops
    the save and rows written before it are kept.
    """
    try:
        outcome = save_service.save_record(store, validator, request)
    except StorageError as e:
        logger.error(f"Save failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="저장 중 오류가 발생했습니다.",
        )

    if not outcome.success:
        error = SaveErrorDetail(
            kind=outcome.error.kind.value if outcome.error.kind else None,
            message=outcome.error.message,
            field=outcome.error.field,
            row=outcome.row_number,
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.model_dump())

    return _detail(outcome.company, store)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(company_id: str, store: RecordStore = Depends(get_store)):
    """Delete a company and all of its fiscal years (unknown ids succeed too)"""
    try:
        store.delete_company(company_id)
    except StorageError as e:
        logger.error(f"Delete failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="삭제 중 오류가 발생했습니다.",
        )
    return None
