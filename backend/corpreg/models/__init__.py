from corpreg.models.company import Company
from corpreg.models.fiscal_year import FiscalYear

__all__ = [
    "Company",
    "FiscalYear",
]
