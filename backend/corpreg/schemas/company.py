from typing import Optional

from pydantic import BaseModel, field_validator

from corpreg.schemas.fiscal_year import FiscalYearResponse, FiscalYearRow


class CompanyData(BaseModel):
    """Fields written to the store; unset fields are left untouched on update"""

    id: Optional[str] = None
    name: Optional[str] = None
    registration_number: Optional[str] = None


class CompanySaveRequest(BaseModel):
    """Company form plus every fiscal year row currently in the grid"""

    company_id: Optional[str] = None
    name: str = ""
    registration_number: str = ""
    fiscal_years: list[FiscalYearRow] = []

    @field_validator("name", "registration_number", mode="before")
    @classmethod
    def strip_text(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("company_id", mode="before")
    @classmethod
    def blank_id_is_none(cls, value):
        if value is None or not str(value).strip():
            return None
        return str(value).strip()


class CompanyResponse(BaseModel):
    """Schema for company response"""

    id: str
    name: str
    registration_number: str

    class Config:
        from_attributes = True


class CompanyDetailResponse(CompanyResponse):
    """Company with its fiscal years in insertion order"""

    fiscal_years: list[FiscalYearResponse] = []


class SaveErrorDetail(BaseModel):
    """Body of a rejected save"""

    kind: Optional[str] = None
    message: str
    field: Optional[str] = None
    row: Optional[int] = None
