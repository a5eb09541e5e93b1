from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from corpreg.database import Base


class FiscalYear(Base):
    """
    Fiscal Year (사업연도)
    One accounting period of a company. Dates are kept exactly as entered (YYYYMMDD)
    """

    __tablename__ = "fiscal_years"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False, index=True)
    company_id = Column(String(32), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

    # Year identification
    fiscal_year = Column(String(4), nullable=False)  # e.g. "2024"

    # Date range, YYYYMMDD
    start_date = Column(String(8), nullable=False)
    end_date = Column(String(8), nullable=False)

    is_main_fiscal_year = Column(Boolean, default=False, nullable=True)  # 사업연도여부
    remarks = Column(String(200), default="", nullable=True)  # 비고

    # Relationships
    company = relationship("Company", back_populates="fiscal_years")

    def __repr__(self):
        return f"<FiscalYear {self.fiscal_year} ({self.start_date}~{self.end_date})>"

    @property
    def period(self) -> str:
        return f"{self.start_date}~{self.end_date}"
