"""
CSV export of every company and its fiscal years.

The file opens directly in Excel: UTF-8 with a byte-order mark, every value
quoted, one line per fiscal year. A company without fiscal years still gets
one line with the fiscal year columns left empty.
"""

import csv
import io
from datetime import date
from typing import Optional

from corpreg.config import settings
from corpreg.models.company import Company
from corpreg.models.fiscal_year import FiscalYear

HEADER = ["법인명", "법인등록번호", "사업연도", "시작일", "종료일", "사업연도여부", "비고"]


def _line(company: Company, fiscal_year: Optional[FiscalYear]) -> list[str]:
    if fiscal_year is None:
        return [company.name, company.registration_number, "", "", "", "", ""]
    return [
        company.name,
        company.registration_number,
        fiscal_year.fiscal_year,
        fiscal_year.start_date,
        fiscal_year.end_date,
        "Y" if fiscal_year.is_main_fiscal_year else "N",
        fiscal_year.remarks or "",
    ]


def build_csv(snapshot: list[tuple[Company, list[FiscalYear]]]) -> str:
    """Render a store snapshot as CSV text (without the byte-order mark)"""
    buffer = io.StringIO()
    # Header is written bare, data values are all quoted
    buffer.write(",".join(HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for company, fiscal_years in snapshot:
        if not fiscal_years:
            writer.writerow(_line(company, None))
            continue
        for fiscal_year in fiscal_years:
            writer.writerow(_line(company, fiscal_year))

    return buffer.getvalue()


def export_bytes(snapshot: list[tuple[Company, list[FiscalYear]]]) -> bytes:
    """CSV encoded for download, BOM included"""
    return build_csv(snapshot).encode(settings.export_encoding)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"법인정보_{today.strftime('%Y%m%d')}.csv"
