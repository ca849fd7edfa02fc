from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.permissions import require_roles
from app.core.roles import SUMMARY_ROLES
from app.db.session import get_db
from app.schemas.summary import HrDetailOut, HrSummaryOut
from app.services import summary_service
from app.services.invoice_service import render_invoice_pdf

router = APIRouter(
    tags=["HR"],
    dependencies=[Depends(require_roles(SUMMARY_ROLES))],
)


@router.get("/summary", response_model=HrSummaryOut)
def hr_summary(
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
    db: Session = Depends(get_db),
):
    return summary_service.hr_summary(db, year=year, month=month)


def _detail_or_404(db: Session, lecturer: str, year: int, month: int) -> dict:
    if not lecturer.strip():
        raise HTTPException(status_code=404, detail="No approved claims for that lecturer and period")
    detail = summary_service.hr_detail(db, lecturer, year, month)
    if detail is None:
        raise HTTPException(status_code=404, detail="No approved claims for that lecturer and period")
    return detail


@router.get("/details", response_model=HrDetailOut)
def hr_details(
    lecturer: str,
    year: int,
    month: int = Query(ge=1, le=12),
    db: Session = Depends(get_db),
):
    return _detail_or_404(db, lecturer, year, month)


@router.get("/details/pdf")
def hr_details_pdf(
    lecturer: str,
    year: int,
    month: int = Query(ge=1, le=12),
    db: Session = Depends(get_db),
):
    detail = _detail_or_404(db, lecturer, year, month)
    filename = f"claims_{year}_{month:02d}.pdf"

    return Response(
        content=render_invoice_pdf(detail),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
