from typing import Optional

from pydantic import BaseModel, Field, field_validator

from corpreg.schemas.validation import RowState, ValidationResult


class FiscalYearRow(BaseModel):
    """A fiscal year row as entered in the grid, saved or not"""

    id: Optional[str] = None
    fiscal_year: str = ""
    start_date: str = ""
    end_date: str = ""
    is_main_fiscal_year: bool = False
    remarks: str = ""

    @field_validator("fiscal_year", "start_date", "end_date", "remarks", mode="before")
    @classmethod
    def strip_text(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("id", mode="before")
    @classmethod
    def blank_id_is_none(cls, value):
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator("is_main_fiscal_year", mode="before")
    @classmethod
    def missing_flag_is_false(cls, value):
        return False if value is None else value

    @property
    def is_blank(self) -> bool:
        """True when none of the key fields has been filled in"""
        return not (self.fiscal_year or self.start_date or self.end_date)


class FiscalYearData(BaseModel):
    """Fields written to the store; unset fields are left untouched on update"""

    id: Optional[str] = None
    company_id: Optional[str] = None
    fiscal_year: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_main_fiscal_year: Optional[bool] = None
    remarks: Optional[str] = None


class FiscalYearResponse(BaseModel):
    """Schema for fiscal year response"""

    id: str
    company_id: str
    fiscal_year: str
    start_date: str
    end_date: str
    is_main_fiscal_year: bool = False
    remarks: str = ""

    @field_validator("is_main_fiscal_year", mode="before")
    @classmethod
    def missing_flag_is_false(cls, value):
        return False if value is None else value

    @field_validator("remarks", mode="before")
    @classmethod
    def missing_remarks_is_blank(cls, value):
        return "" if value is None else value

    class Config:
        from_attributes = True


class FieldValidationRequest(BaseModel):
    """Validate one field of one grid row on blur/change"""

    field: str = Field(..., pattern=r"^(fiscal_year|start_date|end_date|remarks)$")
    row: FiscalYearRow
    sibling_rows: list[FiscalYearRow] = []


class RowStatesRequest(BaseModel):
    company_id: Optional[str] = None
    rows: list[FiscalYearRow] = []


class RowStateResponse(BaseModel):
    index: int
    state: RowState
    result: Optional[ValidationResult] = None
