"""
Dependency functions wiring the record store and validator into requests
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from corpreg.database import get_db
from corpreg.services.record_store import RecordStore
from corpreg.services.validator import Validator


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """
    Record store bound to the request's database session

    Args:
        db: Database session

    Returns:
        RecordStore for this request
    """
    return RecordStore(db)


def get_validator(store: RecordStore = Depends(get_store)) -> Validator:
    """Validator sharing the request's record store"""
    return Validator(store)
