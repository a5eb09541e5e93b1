"""
Record store for companies and their fiscal years.

Owns the persisted Company and FiscalYear collections. Every mutation is
committed before the method returns, so readers always see the latest write.
Duplicate and overlap queries here only look at persisted rows; rows still
being edited are the validator's concern.
"""

import logging
import random
import re
import string
import time
from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from corpreg.models.company import Company
from corpreg.models.fiscal_year import FiscalYear
from corpreg.schemas.company import CompanyData
from corpreg.schemas.fiscal_year import FiscalYearData
from corpreg.schemas.validation import DateOverlap

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_COMPACT_DATE = re.compile(r"[0-9]{8}")


class StorageError(Exception):
    """Raised when a write could not be persisted."""

    def __init__(self, message: str, action: str):
        self.action = action
        super().__init__(f"Storage failed during '{action}': {message}")


def generate_id() -> str:
    """Millisecond timestamp followed by nine base-36 characters"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


def parse_compact_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a YYYYMMDD string into a date.

    Returns None for anything that is not 8 digits or not a real calendar
    date (month 13, Feb 30, ...).
    """
    if not value or not _COMPACT_DATE.fullmatch(value):
        return None
    try:
        return date(int(value[:4]), int(value[4:6]), int(value[6:]))
    except ValueError:
        return None


def _values(data: Union[BaseModel, dict[str, Any]]) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True, exclude_none=True)
    return {k: v for k, v in data.items() if v is not None}


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Could not persist {action}")
            raise StorageError(str(e), action) from e

    # -------------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------------

    def get_company(self, company_id: str) -> Optional[Company]:
        if not company_id:
            return None
        return self.db.query(Company).filter(Company.id == company_id).first()

    def all_companies(self) -> list[Company]:
        return self.db.query(Company).order_by(Company.seq).all()

    def save_company(self, data: Union[CompanyData, dict[str, Any]]) -> Optional[Company]:
        """
        Insert the company when it has no id yet, otherwise merge the given
        fields into the stored record.

        An id that is not in the store is a no-op and returns None; the
        caller has to look the company up again.
        """
        values = _values(data)
        company_id = values.pop("id", None)

        if not company_id:
            company = Company(id=generate_id(), **values)
            self.db.add(company)
            self._commit(f"insert company {company.id}")
            logger.info(f"Saved new company {company.id} ({company.registration_number})")
            return company

        company = self.get_company(company_id)
        if company is None:
            logger.warning(f"Company {company_id} not found, nothing saved")
            return None

        for field, value in values.items():
            setattr(company, field, value)
        self._commit(f"update company {company_id}")
        logger.info(f"Updated company {company_id}")
        return company

    def find_company(
        self, name: Optional[str] = None, registration_number: Optional[str] = None
    ) -> Optional[Company]:
        """First company whose name OR registration number matches"""
        criteria = []
        if name:
            criteria.append(Company.name == name)
        if registration_number:
            criteria.append(Company.registration_number == registration_number)
        if not criteria:
            return None
        return self.db.query(Company).filter(or_(*criteria)).order_by(Company.seq).first()

    def registration_number_exists(self, number: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Company).filter(Company.registration_number == number)
        if exclude_id:
            query = query.filter(Company.id != exclude_id)
        return query.first() is not None

    def delete_company(self, company_id: str) -> bool:
        """Delete the company and all of its fiscal years. Unknown ids are fine."""
        self.db.query(FiscalYear).filter(FiscalYear.company_id == company_id).delete(synchronize_session=False)
        deleted = self.db.query(Company).filter(Company.id == company_id).delete(synchronize_session=False)
        self._commit(f"delete company {company_id}")
        self.db.expire_all()
        if deleted:
            logger.info(f"Deleted company {company_id} with its fiscal years")
        return True

    # -------------------------------------------------------------------------
    # Fiscal years
    # -------------------------------------------------------------------------

    def get_fiscal_year(self, fiscal_year_id: str) -> Optional[FiscalYear]:
        if not fiscal_year_id:
            return None
        return self.db.query(FiscalYear).filter(FiscalYear.id == fiscal_year_id).first()

    def all_fiscal_years(self) -> list[FiscalYear]:
        return self.db.query(FiscalYear).order_by(FiscalYear.seq).all()

    def fiscal_years_of(self, company_id: str) -> list[FiscalYear]:
        return (
            self.db.query(FiscalYear)
            .filter(FiscalYear.company_id == company_id)
            .order_by(FiscalYear.seq)
            .all()
        )

    def save_fiscal_year(self, data: Union[FiscalYearData, dict[str, Any]]) -> Optional[FiscalYear]:
        """Upsert by id, same rules as save_company"""
        values = _values(data)
        fiscal_year_id = values.pop("id", None)

        if not fiscal_year_id:
            values.setdefault("is_main_fiscal_year", False)
            values.setdefault("remarks", "")
            fiscal_year = FiscalYear(id=generate_id(), **values)
            self.db.add(fiscal_year)
            self._commit(f"insert fiscal year {fiscal_year.id}")
            logger.info(f"Saved fiscal year {fiscal_year.fiscal_year} for company {fiscal_year.company_id}")
            return fiscal_year

        fiscal_year = self.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None:
            logger.warning(f"Fiscal year {fiscal_year_id} not found, nothing saved")
            return None

        for field, value in values.items():
            setattr(fiscal_year, field, value)
        self._commit(f"update fiscal year {fiscal_year_id}")
        logger.info(f"Updated fiscal year {fiscal_year_id}")
        return fiscal_year

    def delete_fiscal_year(self, fiscal_year_id: str) -> bool:
        self.db.query(FiscalYear).filter(FiscalYear.id == fiscal_year_id).delete(synchronize_session=False)
        self._commit(f"delete fiscal year {fiscal_year_id}")
        self.db.expire_all()
        return True

    def delete_fiscal_years_of(self, company_id: str) -> bool:
        self.db.query(FiscalYear).filter(FiscalYear.company_id == company_id).delete(synchronize_session=False)
        self._commit(f"delete fiscal years of company {company_id}")
        self.db.expire_all()
        return True

    def fiscal_year_exists(self, company_id: str, year: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(FiscalYear).filter(
            FiscalYear.company_id == company_id,
            FiscalYear.fiscal_year == year,
        )
        if exclude_id:
            query = query.filter(FiscalYear.id != exclude_id)
        return query.first() is not None

    def date_overlap(
        self, company_id: str, start: str, end: str, exclude_id: Optional[str] = None
    ) -> DateOverlap:
        """
        Find the first persisted fiscal year of the company whose period
        intersects [start, end], both ends inclusive.

        Periods are compared as calendar dates. Records with malformed dates
        are skipped rather than reported as conflicts.
        """
        new_start = parse_compact_date(start)
        new_end = parse_compact_date(end)
        if new_start is None or new_end is None:
            return DateOverlap()

        for other in self.fiscal_years_of(company_id):
            if exclude_id and other.id == exclude_id:
                continue

            other_start = parse_compact_date(other.start_date)
            other_end = parse_compact_date(other.end_date)
            if other_start is None or other_end is None:
                continue

            if new_start <= other_end and new_end >= other_start:
                logger.warning(
                    f"Period {start}~{end} overlaps fiscal year {other.fiscal_year} ({other.period}) "
                    f"of company {company_id}"
                )
                return DateOverlap(
                    is_overlap=True,
                    conflict_fiscal_year=other.fiscal_year,
                    conflict_period=other.period,
                )

        return DateOverlap()

    # -------------------------------------------------------------------------
    # Whole store
    # -------------------------------------------------------------------------

    def export_snapshot(self) -> list[tuple[Company, list[FiscalYear]]]:
        """Every company paired with its fiscal years, both in insertion order"""
        return [(company, self.fiscal_years_of(company.id)) for company in self.all_companies()]

    def clear_all(self) -> bool:
        self.db.query(FiscalYear).delete(synchronize_session=False)
        self.db.query(Company).delete(synchronize_session=False)
        self._commit("clear all data")
        self.db.expire_all()
        logger.warning("All companies and fiscal years were deleted")
        return True
