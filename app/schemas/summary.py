from typing import List, Optional

from pydantic import BaseModel

from app.schemas.claim import ClaimOut


class LecturerDashboardOut(BaseModel):
    claim_count: int
    total_hours: float
    total_amount: float
    approved_amount: float
    pending_amount: float
    rejected_amount: float


class HrSummaryRow(BaseModel):
    lecturer_name: str
    year: int
    month: int
    claim_count: int
    total_hours: float
    total_amount: float


class HrSummaryOut(BaseModel):
    selected_year: Optional[int] = None
    selected_month: Optional[int] = None
    years: List[int] = []
    rows: List[HrSummaryRow] = []


class HrDetailOut(BaseModel):
    lecturer_name: str
    year: int
    month: int
    total_hours: float
    total_amount: float
    claims: List[ClaimOut] = []
