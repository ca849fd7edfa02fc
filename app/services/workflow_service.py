import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.roles import Actor, Role
from app.models.claim import Claim, ClaimStatus
from app.services import audit_service, transitions
from app.services.outcomes import (
    Conflict,
    Forbidden,
    NotFound,
    StorageFailure,
    TransitionApplied,
    TransitionResult,
)

logger = logging.getLogger(__name__)


def _load_for_update(db: Session, claim_id) -> Optional[Claim]:
    # row lock serializes concurrent decisions on the same claim;
    # the version column catches anything the lock cannot (e.g. SQLite)
    return (
        db.query(Claim)
        .filter(Claim.id == claim_id)
        .with_for_update()
        .first()
    )


def apply_transition(
    db: Session,
    claim_id,
    actor: Actor,
    requested_status: ClaimStatus,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> TransitionResult:
    claim = _load_for_update(db, claim_id)
    if claim is None:
        return NotFound("Claim", str(claim_id))

    from_status = claim.status

    forbidden = transitions.check_transition(actor.roles, from_status, requested_status)
    if forbidden is not None:
        db.rollback()
        logger.info(
            "transition refused claim=%s %s -> %s actor=%s roles=%s",
            claim_id, from_status.value, requested_status.value,
            actor.user_id, sorted(r.value for r in actor.roles),
        )
        return forbidden

    granted = transitions.granting_roles(actor.roles, from_status, requested_status)
    if granted == {Role.lecturer} and claim.lecturer_user_id != actor.user_id:
        db.rollback()
        return Forbidden(
            reason="Only the lecturer who owns this claim can change it.",
            from_status=from_status,
            to_status=requested_status,
            actor_roles=actor.roles,
        )

    now = clock()

    claim.status = requested_status
    if requested_status in transitions.MANAGER_DECISIONS:
        claim.reviewed_at = now
        claim.manager_user_id = actor.user_id
    elif requested_status in transitions.COORDINATOR_DECISIONS:
        claim.coordinator_user_id = actor.user_id
    elif from_status in transitions.TERMINAL_STATUSES:
        # manager reopened a finalized claim
        claim.reviewed_at = None

    audit_service.record_transition(
        db,
        claim,
        from_status=from_status,
        to_status=requested_status,
        changed_by=actor.user_id,
        changed_at=now,
    )

    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("concurrent update lost for claim=%s", claim_id)
        return Conflict()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failed to persist transition for claim=%s", claim_id)
        return StorageFailure()

    logger.info(
        "claim=%s %s -> %s by=%s",
        claim_id, from_status.value, requested_status.value, actor.user_id,
    )
    return TransitionApplied(
        claim_id=claim.id,
        from_status=from_status,
        to_status=requested_status,
        changed_at=now,
    )


def available_transitions(claim: Claim, actor: Actor) -> List[ClaimStatus]:
    """Statuses this actor could move the claim to right now."""
    targets = []
    for target in transitions.allowed_targets(actor.roles, claim.status):
        granted = transitions.granting_roles(actor.roles, claim.status, target)
        if granted == {Role.lecturer} and claim.lecturer_user_id != actor.user_id:
            continue
        targets.append(target)
    return targets
