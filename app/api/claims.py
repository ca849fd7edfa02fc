# app/api/claims.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.auth import get_current_actor
from app.api.errors import unwrap
from app.core.permissions import require_roles
from app.core.roles import Actor, ROLE_COORDINATOR, ROLE_LECTURER, ROLE_MANAGER
from app.db.session import get_db
from app.models.claim import parse_status, to_legacy_status
from app.schemas.claim import (
    ClaimDetailOut,
    ClaimOut,
    StatusHistoryOut,
    TransitionOut,
    TransitionRequest,
)
from app.schemas.summary import LecturerDashboardOut
from app.services import audit_service, claim_service, summary_service, workflow_service
from app.services.storage import BlobStore, get_blob_store

router = APIRouter(tags=["Claims"])


# --------------------------------------------------
# CREATE DRAFT
# --------------------------------------------------
@router.post("", response_model=ClaimOut, status_code=status.HTTP_201_CREATED)
def create_claim(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
):
    return unwrap(claim_service.create_claim(db, actor, payload))


# --------------------------------------------------
# LIST MY CLAIMS
# --------------------------------------------------
@router.get("", response_model=List[ClaimOut])
def list_my_claims(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return claim_service.list_for_lecturer(db, actor)


# --------------------------------------------------
# REVIEW QUEUE (COORDINATOR / MANAGER)
# --------------------------------------------------
@router.get("/review-queue", response_model=List[ClaimOut])
def review_queue(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_COORDINATOR, ROLE_MANAGER])),
):
    return claim_service.review_queue(db)


@router.get("/dashboard", response_model=LecturerDashboardOut)
def lecturer_dashboard(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
):
    return summary_service.lecturer_dashboard(db, actor)


# --------------------------------------------------
# GET ONE CLAIM (WITH HISTORY)
# --------------------------------------------------
@router.get("/{claim_id}", response_model=ClaimDetailOut)
def get_claim(
    claim_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    claim = unwrap(claim_service.get_claim(db, claim_id, actor))

    out = ClaimDetailOut.model_validate(claim)
    out.history = [
        StatusHistoryOut.model_validate(entry)
        for entry in audit_service.history_for(db, claim.id)
    ]
    out.allowed_transitions = workflow_service.available_transitions(claim, actor)
    return out


# --------------------------------------------------
# UPDATE HEADER (EDITABLE CLAIMS ONLY)
# --------------------------------------------------
@router.put("/{claim_id}", response_model=ClaimOut)
def update_claim(
    claim_id: UUID,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
):
    return unwrap(claim_service.update_claim(db, claim_id, actor, payload))


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_claim(
    claim_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    blob_store: BlobStore = Depends(get_blob_store),
):
    unwrap(claim_service.delete_claim(db, claim_id, actor, blob_store))
    return None


# --------------------------------------------------
# STATUS TRANSITION
# --------------------------------------------------
@router.post("/{claim_id}/transitions", response_model=TransitionOut)
def change_status(
    claim_id: UUID,
    payload: TransitionRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        requested = parse_status(payload.status)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Validation failed", "errors": {"status": [str(e)]}},
        )

    result = unwrap(workflow_service.apply_transition(db, claim_id, actor, requested))
    return TransitionOut(
        claim_id=result.claim_id,
        from_status=result.from_status,
        to_status=result.to_status,
        legacy_status=to_legacy_status(result.to_status),
        changed_at=result.changed_at,
    )


@router.get("/{claim_id}/history", response_model=List[StatusHistoryOut])
def claim_history(
    claim_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    claim = unwrap(claim_service.get_claim(db, claim_id, actor))
    return audit_service.history_for(db, claim.id)
