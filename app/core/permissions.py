# app/core/permissions.py

from typing import Iterable

from fastapi import Depends, HTTPException, status

from app.api.auth import get_current_actor
from app.core.roles import Actor, Role


def require_roles(roles: Iterable[Role]):
    allowed = frozenset(roles)

    def checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not actor.has_any(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return actor

    return checker
