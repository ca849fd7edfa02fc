# app/models/claim.py

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Enum,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class ClaimStatus(str, enum.Enum):
    draft = "Draft"
    submitted = "Submitted"
    under_review = "UnderReview"
    coordinator_approved = "CoordinatorApproved"
    coordinator_rejected = "CoordinatorRejected"
    manager_approved = "ManagerApproved"
    manager_rejected = "ManagerRejected"


class LegacyStatus(str, enum.Enum):
    """Status vocabulary of two-tier deployments (no coordinator step)."""
    draft = "Draft"
    submitted = "Submitted"
    under_review = "UnderReview"
    approved = "Approved"
    rejected = "Rejected"


_LEGACY_BY_STATUS = {
    ClaimStatus.draft: LegacyStatus.draft,
    ClaimStatus.submitted: LegacyStatus.submitted,
    ClaimStatus.under_review: LegacyStatus.under_review,
    # a recommendation is still in review for a two-tier client
    ClaimStatus.coordinator_approved: LegacyStatus.under_review,
    ClaimStatus.coordinator_rejected: LegacyStatus.under_review,
    ClaimStatus.manager_approved: LegacyStatus.approved,
    ClaimStatus.manager_rejected: LegacyStatus.rejected,
}

_STATUS_BY_ALIAS = {
    LegacyStatus.approved.value: ClaimStatus.manager_approved,
    LegacyStatus.rejected.value: ClaimStatus.manager_rejected,
}


def to_legacy_status(status: ClaimStatus) -> LegacyStatus:
    return _LEGACY_BY_STATUS[ClaimStatus(status)]


def parse_status(value) -> ClaimStatus:
    """
    Accept a canonical status or one of the legacy aliases
    ("Approved", "Rejected"). Raises ValueError for anything else.
    """
    if isinstance(value, ClaimStatus):
        return value
    if value in _STATUS_BY_ALIAS:
        return _STATUS_BY_ALIAS[value]
    try:
        return ClaimStatus(value)
    except ValueError:
        raise ValueError(f"Unknown claim status: {value!r}") from None


def status_column_type(name: str):
    return Enum(
        ClaimStatus,
        name=name,
        values_callable=lambda e: [x.value for x in e],
        validate_strings=True,
    )


class Claim(Base):
    __tablename__ = "claims"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    lecturer_user_id = Column(String, nullable=False, index=True)
    lecturer_name = Column(String, nullable=False)
    module_code = Column(String, nullable=False)

    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    # set when a coordinator / manager records a decision
    coordinator_user_id = Column(String, nullable=True)
    manager_user_id = Column(String, nullable=True)

    status = Column(
        status_column_type("claim_status"),
        default=ClaimStatus.draft,
        nullable=False,
        index=True,
    )

    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    line_items = relationship(
        "ClaimLineItem",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="[ClaimLineItem.date, ClaimLineItem.position]",
    )

    documents = relationship(
        "SupportingDocument",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="SupportingDocument.uploaded_at",
    )

    status_history = relationship(
        "ClaimStatusHistory",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="ClaimStatusHistory.id",
    )

    @property
    def total_amount(self) -> Decimal:
        return sum((item.amount for item in self.line_items), Decimal("0"))

    @property
    def total_hours(self) -> Decimal:
        return sum((Decimal(item.hours) for item in self.line_items), Decimal("0"))

    @property
    def legacy_status(self) -> LegacyStatus:
        return to_legacy_status(self.status)
