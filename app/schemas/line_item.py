from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class LineItemCreate(BaseModel):
    date: date
    hours: Decimal = Field(ge=0, le=24, decimal_places=2)
    rate_per_hour: Decimal = Field(ge=0, le=99999, decimal_places=2)
    notes: Optional[str] = Field(default=None, max_length=1000)


class LineItemOut(BaseModel):
    id: UUID
    claim_id: UUID
    date: date
    hours: float
    rate_per_hour: float
    amount: float
    notes: Optional[str]

    class Config:
        from_attributes = True
