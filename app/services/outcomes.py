"""
Result values returned by the claim services.

Expected failures (missing claim, forbidden move, invalid input, storage
trouble, lost race) are returned as values instead of raised, so callers
decide how to present them. The API layer turns them into HTTP errors.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Union
from uuid import UUID

from app.core.roles import Role
from app.models.claim import ClaimStatus

GENERIC_STORAGE_MESSAGE = "The operation failed. Please try again or contact support."


class Failure:
    status_code = 400

    def detail(self):
        return str(self)


@dataclass(frozen=True)
class NotFound(Failure):
    entity: str
    entity_id: str

    status_code = 404

    def detail(self):
        return f"{self.entity} not found"


@dataclass(frozen=True)
class Forbidden(Failure):
    reason: str
    from_status: Optional[ClaimStatus] = None
    to_status: Optional[ClaimStatus] = None
    actor_roles: FrozenSet[Role] = frozenset()

    status_code = 403

    def detail(self):
        body = {"message": self.reason}
        if self.from_status is not None:
            body["from_status"] = self.from_status.value
        if self.to_status is not None:
            body["to_status"] = self.to_status.value
        if self.from_status is not None or self.to_status is not None:
            body["actor_roles"] = sorted(r.value for r in self.actor_roles)
        return body


@dataclass(frozen=True)
class ValidationFailed(Failure):
    errors: Dict[str, List[str]] = field(default_factory=dict)

    status_code = 422

    def detail(self):
        return {"message": "Validation failed", "errors": self.errors}


@dataclass(frozen=True)
class StorageFailure(Failure):
    message: str = GENERIC_STORAGE_MESSAGE

    status_code = 500

    def detail(self):
        return self.message


@dataclass(frozen=True)
class Conflict(Failure):
    message: str = "The claim was changed by someone else. Reload and try again."

    status_code = 409

    def detail(self):
        return self.message


@dataclass(frozen=True)
class TransitionApplied:
    claim_id: UUID
    from_status: ClaimStatus
    to_status: ClaimStatus
    changed_at: datetime


TransitionResult = Union[TransitionApplied, NotFound, Forbidden, StorageFailure, Conflict]


def is_failure(result) -> bool:
    return isinstance(result, Failure)


def validation_failed_from(exc) -> ValidationFailed:
    """Group a pydantic ValidationError into a field -> messages map."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        errors.setdefault(loc, []).append(err.get("msg", "Invalid value"))
    return ValidationFailed(errors=errors)
