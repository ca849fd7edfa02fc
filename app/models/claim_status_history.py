"""Append-only audit trail of claim status changes."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid, event
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.claim import status_column_type


class AuditTrailViolation(RuntimeError):
    pass


class ClaimStatusHistory(Base):
    __tablename__ = "claim_status_history"

    # autoincrement id breaks ties between entries with the same timestamp
    id = Column(Integer, primary_key=True, autoincrement=True)

    claim_id = Column(
        Uuid,
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    from_status = Column(status_column_type("claim_history_from_status"), nullable=False)
    to_status = Column(status_column_type("claim_history_to_status"), nullable=False)
    changed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    changed_by = Column(String, nullable=True)

    claim = relationship("Claim", back_populates="status_history")


@event.listens_for(ClaimStatusHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise AuditTrailViolation(
        f"Status history entry {target.id} is append-only and cannot be modified"
    )
