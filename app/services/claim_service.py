import logging
from typing import List, Optional, Union

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.roles import Actor, Role, REVIEWER_ROLES, SUMMARY_ROLES
from app.models.claim import Claim, ClaimStatus
from app.models.claim_line_item import ClaimLineItem
from app.schemas.claim import ClaimCreate, ClaimUpdate
from app.schemas.line_item import LineItemCreate
from app.services import transitions
from app.services.outcomes import (
    Failure,
    Forbidden,
    NotFound,
    StorageFailure,
    ValidationFailed,
    validation_failed_from,
)
from app.services.storage import BlobStore

logger = logging.getLogger(__name__)

REVIEW_QUEUE_STATUSES = (
    ClaimStatus.submitted,
    ClaimStatus.under_review,
    ClaimStatus.coordinator_approved,
    ClaimStatus.coordinator_rejected,
)

_STATUS_ORDER = {status: index for index, status in enumerate(ClaimStatus)}


def _claim_query(db: Session):
    return db.query(Claim).options(
        selectinload(Claim.line_items),
        selectinload(Claim.documents),
    )


def _commit(db: Session, what: str) -> Optional[StorageFailure]:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failed to persist %s", what)
        return StorageFailure()
    return None


def can_view(actor: Actor, claim: Claim) -> bool:
    if claim.lecturer_user_id == actor.user_id:
        return True
    return actor.has_any(REVIEWER_ROLES | SUMMARY_ROLES)


def get_claim(db: Session, claim_id, actor: Actor) -> Union[Claim, Failure]:
    claim = _claim_query(db).filter(Claim.id == claim_id).first()
    if not claim:
        return NotFound("Claim", str(claim_id))
    if not can_view(actor, claim):
        return Forbidden("You are not allowed to view this claim.")
    return claim


def editable_claim(db: Session, claim_id, actor: Actor) -> Union[Claim, Failure]:
    """The claim, if the actor is its lecturer and it is still open for edits."""
    claim = db.query(Claim).filter(Claim.id == claim_id).first()
    if not claim:
        return NotFound("Claim", str(claim_id))
    if Role.lecturer not in actor.roles or claim.lecturer_user_id != actor.user_id:
        return Forbidden("You can only edit your own draft/submitted claims.")
    if not transitions.is_editable(claim.status):
        return Forbidden(
            f"Claim is locked while {claim.status.value}.",
            from_status=claim.status,
            actor_roles=actor.roles,
        )
    return claim


def create_claim(db: Session, actor: Actor, data) -> Union[Claim, Failure]:
    if Role.lecturer not in actor.roles:
        return Forbidden("Only lecturers can create claims.")

    try:
        payload = ClaimCreate.model_validate(data)
    except ValidationError as e:
        return validation_failed_from(e)

    lecturer_name = payload.lecturer_name or (actor.name or "").strip()
    if not lecturer_name:
        return ValidationFailed({"lecturer_name": ["Field required"]})

    claim = Claim(
        lecturer_user_id=actor.user_id,
        lecturer_name=lecturer_name,
        module_code=payload.module_code,
        year=payload.year,
        month=payload.month,
        status=ClaimStatus.draft,
    )
    db.add(claim)

    failure = _commit(db, "new claim")
    if failure:
        return failure

    db.refresh(claim)
    logger.info("claim=%s created by lecturer=%s", claim.id, actor.user_id)
    return claim


def update_claim(db: Session, claim_id, actor: Actor, data) -> Union[Claim, Failure]:
    claim = editable_claim(db, claim_id, actor)
    if isinstance(claim, Failure):
        return claim

    try:
        payload = ClaimUpdate.model_validate(data)
    except ValidationError as e:
        return validation_failed_from(e)

    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(claim, k, v)

    failure = _commit(db, f"claim {claim_id} header")
    if failure:
        return failure

    db.refresh(claim)
    return claim


def list_for_lecturer(db: Session, actor: Actor) -> List[Claim]:
    return (
        _claim_query(db)
        .filter(Claim.lecturer_user_id == actor.user_id)
        .order_by(Claim.year.desc(), Claim.month.desc(), Claim.submitted_at.desc())
        .all()
    )


def review_queue(db: Session) -> List[Claim]:
    claims = (
        _claim_query(db)
        .filter(Claim.status.in_(REVIEW_QUEUE_STATUSES))
        .all()
    )
    # workflow order first, newest period first within a status
    return sorted(
        claims,
        key=lambda c: (_STATUS_ORDER[c.status], -c.year, -c.month),
    )


def add_line_item(db: Session, claim_id, actor: Actor, data) -> Union[ClaimLineItem, Failure]:
    claim = editable_claim(db, claim_id, actor)
    if isinstance(claim, Failure):
        return claim

    try:
        payload = LineItemCreate.model_validate(data)
    except ValidationError as e:
        return validation_failed_from(e)

    last = (
        db.query(func.max(ClaimLineItem.position))
        .filter(ClaimLineItem.claim_id == claim.id)
        .scalar()
    )

    item = ClaimLineItem(
        claim_id=claim.id,
        position=(last or 0) + 1,
        date=payload.date,
        hours=payload.hours,
        rate_per_hour=payload.rate_per_hour,
        notes=payload.notes,
    )
    db.add(item)

    failure = _commit(db, f"line item on claim {claim_id}")
    if failure:
        return failure

    db.refresh(item)
    return item


def remove_line_item(db: Session, item_id, actor: Actor) -> Union[ClaimLineItem, Failure]:
    item = db.query(ClaimLineItem).filter(ClaimLineItem.id == item_id).first()
    if not item:
        return NotFound("Line item", str(item_id))

    claim = editable_claim(db, item.claim_id, actor)
    if isinstance(claim, Failure):
        return claim

    db.delete(item)
    failure = _commit(db, f"line item {item_id} removal")
    if failure:
        return failure
    return item


def delete_claim(db: Session, claim_id, actor: Actor, blob_store: BlobStore):
    """
    Managers may delete any claim; a lecturer may delete their own draft.

    Rows go first (children cascade with the claim). Files are removed
    afterwards on a best-effort basis: a file that cannot be removed is
    logged and left behind rather than blocking the delete.
    """
    claim = _claim_query(db).filter(Claim.id == claim_id).first()
    if not claim:
        return NotFound("Claim", str(claim_id))

    is_manager = Role.manager in actor.roles
    owns_draft = (
        claim.lecturer_user_id == actor.user_id
        and Role.lecturer in actor.roles
        and claim.status == ClaimStatus.draft
    )
    if not (is_manager or owns_draft):
        return Forbidden("Only managers, or the owning lecturer for a draft, can delete a claim.")

    handles = [d.storage_path for d in claim.documents if d.storage_path]

    db.delete(claim)
    failure = _commit(db, f"deletion of claim {claim_id}")
    if failure:
        return failure

    for handle in handles:
        try:
            blob_store.delete(handle)
        except OSError:
            logger.warning(
                "could not remove file %s of deleted claim=%s", handle, claim_id,
                exc_info=True,
            )

    logger.info("claim=%s deleted by=%s", claim_id, actor.user_id)
    return claim_id
