from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.roles import Actor, parse_roles
from app.core.security import decode_token

bearer_scheme = HTTPBearer()

router = APIRouter(tags=["Auth"])


def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Actor:
    """
    Identity comes from the bearer token issued by the identity provider:
    `sub` is the actor id and `roles` the list of role names.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]

    return Actor(
        user_id=str(user_id),
        roles=parse_roles(roles),
        name=payload.get("name"),
    )


@router.get("/me")
def me(actor: Actor = Depends(get_current_actor)):
    return {
        "id": actor.user_id,
        "name": actor.name,
        "roles": sorted(r.value for r in actor.roles),
    }
