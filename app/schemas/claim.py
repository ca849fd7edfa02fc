# app/schemas/claim.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.claim import ClaimStatus, LegacyStatus
from app.schemas.document import DocumentOut
from app.schemas.line_item import LineItemOut


def _required_text(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class ClaimCreate(BaseModel):
    lecturer_name: Optional[str] = None
    module_code: str
    year: int = Field(ge=2020, le=2100)
    month: int = Field(ge=1, le=12)

    @field_validator("lecturer_name", "module_code")
    @classmethod
    def strip_text(cls, value):
        return _required_text(value)


class ClaimUpdate(BaseModel):
    lecturer_name: Optional[str] = None
    module_code: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=2020, le=2100)
    month: Optional[int] = Field(default=None, ge=1, le=12)

    @field_validator("lecturer_name", "module_code")
    @classmethod
    def strip_text(cls, value):
        return _required_text(value)


class TransitionRequest(BaseModel):
    # canonical status or a legacy alias ("Approved" / "Rejected")
    status: str


class TransitionOut(BaseModel):
    claim_id: UUID
    from_status: ClaimStatus
    to_status: ClaimStatus
    legacy_status: LegacyStatus
    changed_at: datetime


class StatusHistoryOut(BaseModel):
    id: int
    claim_id: UUID
    from_status: ClaimStatus
    to_status: ClaimStatus
    changed_at: datetime
    changed_by: Optional[str]

    class Config:
        from_attributes = True


class ClaimOut(BaseModel):
    id: UUID
    lecturer_user_id: str
    lecturer_name: str
    module_code: str
    year: int
    month: int
    status: ClaimStatus
    legacy_status: LegacyStatus
    coordinator_user_id: Optional[str]
    manager_user_id: Optional[str]
    submitted_at: datetime
    reviewed_at: Optional[datetime]
    total_hours: float
    total_amount: float
    line_items: List[LineItemOut] = []
    documents: List[DocumentOut] = []

    class Config:
        from_attributes = True


class ClaimDetailOut(ClaimOut):
    history: List[StatusHistoryOut] = []
    allowed_transitions: List[ClaimStatus] = []
