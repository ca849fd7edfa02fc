from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.api.errors import unwrap
from app.core.permissions import require_roles
from app.core.roles import Actor, ROLE_LECTURER
from app.db.session import get_db
from app.schemas.line_item import LineItemOut
from app.services import claim_service

router = APIRouter(tags=["Claim line items"])


@router.post(
    "/claims/{claim_id}/items",
    response_model=LineItemOut,
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    claim_id: UUID,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
):
    return unwrap(claim_service.add_line_item(db, claim_id, actor, payload))


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
):
    unwrap(claim_service.remove_line_item(db, item_id, actor))
    return None
