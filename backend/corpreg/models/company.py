from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from corpreg.database import Base


class Company(Base):
    """Company (법인) master record"""

    __tablename__ = "companies"

    # seq keeps insertion order; id is the opaque key handed to callers
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False, index=True)

    name = Column(String(100), nullable=False)  # 법인명
    registration_number = Column(String(13), nullable=False, index=True)  # 법인등록번호 (XXX-XX-XXXXX)

    # Relationships
    fiscal_years = relationship(
        "FiscalYear",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FiscalYear.seq",
    )

    def __repr__(self):
        return f"<Company {self.name} ({self.registration_number})>"
