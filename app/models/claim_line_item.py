import uuid
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import (
    Column,
    String,
    Date,
    Numeric,
    ForeignKey,
    Uuid,
    Integer,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


def line_amount(hours, rate) -> Decimal:
    """hours x rate rounded to a whole unit, halves away from zero."""
    product = Decimal(str(hours)) * Decimal(str(rate))
    return product.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


class ClaimLineItem(Base):
    __tablename__ = "claim_line_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    claim_id = Column(
        Uuid,
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(Date, nullable=False)
    hours = Column(Numeric(5, 2), nullable=False)
    rate_per_hour = Column(Numeric(10, 2), nullable=False)
    notes = Column(String, nullable=True)

    # insertion order within a claim, breaks ties between same-date items
    position = Column(Integer, nullable=False, default=0)

    claim = relationship("Claim", back_populates="line_items")

    @property
    def amount(self) -> Decimal:
        return line_amount(self.hours, self.rate_per_hour)
