import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.claim import Claim, ClaimStatus
from app.models.claim_status_history import ClaimStatusHistory

logger = logging.getLogger(__name__)


def record_transition(
    db: Session,
    claim: Claim,
    from_status: ClaimStatus,
    to_status: ClaimStatus,
    changed_by: Optional[str],
    changed_at: datetime,
) -> ClaimStatusHistory:
    """
    Stage a history entry in the caller's unit of work.

    Nothing is committed here: the caller commits the entry together with
    the claim mutation so both land or neither does.
    """
    entry = ClaimStatusHistory(
        claim_id=claim.id,
        from_status=from_status,
        to_status=to_status,
        changed_at=changed_at,
        changed_by=changed_by,
    )
    db.add(entry)
    logger.debug(
        "staged history entry claim=%s %s -> %s by=%s",
        claim.id, from_status.value, to_status.value, changed_by,
    )
    return entry


def history_for(db: Session, claim_id) -> List[ClaimStatusHistory]:
    """Entries for one claim, newest first."""
    return (
        db.query(ClaimStatusHistory)
        .filter(ClaimStatusHistory.claim_id == claim_id)
        .order_by(ClaimStatusHistory.changed_at.desc(), ClaimStatusHistory.id.desc())
        .all()
    )


def history_count(db: Session, claim_id) -> int:
    return (
        db.query(ClaimStatusHistory)
        .filter(ClaimStatusHistory.claim_id == claim_id)
        .count()
    )
