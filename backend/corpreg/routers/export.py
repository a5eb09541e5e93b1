from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from corpreg.dependencies import get_store
from corpreg.services import export_service
from corpreg.services.record_store import RecordStore

router = APIRouter()


@router.get("/csv")
def export_csv(store: RecordStore = Depends(get_store)):
    """Download every company and fiscal year as CSV (opens in Excel)"""
    snapshot = store.export_snapshot()
    if not snapshot:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="내보낼 데이터가 없습니다.")

    filename = export_service.export_filename()
    return Response(
        content=export_service.export_bytes(snapshot),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
