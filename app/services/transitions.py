"""
Claim status transition rules.

Pure decision logic: which role may move a claim from one status to
another. Nothing here touches the database.

Coordinator decisions are recommendations that can be revised; a manager
decision is final, may bypass the coordinator entirely, and can only be
undone by a manager reopening the claim to UnderReview. There is no path
from Draft to any approved/rejected status in a single move.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from app.core.roles import Role
from app.models.claim import ClaimStatus
from app.services.outcomes import Forbidden

S = ClaimStatus

EDITABLE_STATUSES: FrozenSet[ClaimStatus] = frozenset({S.draft, S.submitted})
REVIEWABLE_STATUSES: FrozenSet[ClaimStatus] = frozenset(
    {S.under_review, S.coordinator_approved, S.coordinator_rejected}
)
COORDINATOR_DECISIONS: FrozenSet[ClaimStatus] = frozenset(
    {S.coordinator_approved, S.coordinator_rejected}
)
MANAGER_DECISIONS: FrozenSet[ClaimStatus] = frozenset(
    {S.manager_approved, S.manager_rejected}
)
TERMINAL_STATUSES = MANAGER_DECISIONS


@dataclass(frozen=True)
class Rule:
    role: Role
    from_statuses: FrozenSet[ClaimStatus]
    to_statuses: FrozenSet[ClaimStatus]

    def matches(self, from_status: ClaimStatus, to_status: ClaimStatus) -> bool:
        return from_status in self.from_statuses and to_status in self.to_statuses


RULES = (
    Rule(Role.lecturer, frozenset({S.draft}), frozenset({S.submitted})),
    Rule(Role.lecturer, frozenset({S.submitted}), frozenset({S.draft})),
    Rule(Role.coordinator, frozenset({S.submitted}), frozenset({S.under_review})),
    Rule(Role.coordinator, REVIEWABLE_STATUSES, COORDINATOR_DECISIONS),
    Rule(Role.manager, REVIEWABLE_STATUSES, MANAGER_DECISIONS),
    Rule(Role.manager, MANAGER_DECISIONS, frozenset({S.under_review})),
)


def granting_roles(
    actor_roles: Iterable[Role],
    from_status: ClaimStatus,
    to_status: ClaimStatus,
) -> FrozenSet[Role]:
    """Roles of the actor that have a rule allowing from_status -> to_status."""
    roles = frozenset(actor_roles)
    return frozenset(
        rule.role
        for rule in RULES
        if rule.role in roles and rule.matches(from_status, to_status)
    )


def is_allowed(
    actor_roles: Iterable[Role],
    from_status: ClaimStatus,
    to_status: ClaimStatus,
) -> bool:
    return bool(granting_roles(actor_roles, from_status, to_status))


def allowed_targets(actor_roles: Iterable[Role], from_status: ClaimStatus) -> List[ClaimStatus]:
    roles = frozenset(actor_roles)
    return [s for s in ClaimStatus if is_allowed(roles, from_status, s)]


def check_transition(
    actor_roles: Iterable[Role],
    from_status: ClaimStatus,
    to_status: ClaimStatus,
) -> Optional[Forbidden]:
    roles = frozenset(actor_roles)
    if is_allowed(roles, from_status, to_status):
        return None
    return Forbidden(
        reason="You don't have permission to change to that status from the current state.",
        from_status=from_status,
        to_status=to_status,
        actor_roles=roles,
    )


def is_editable(status: ClaimStatus) -> bool:
    return status in EDITABLE_STATUSES


def is_terminal(status: ClaimStatus) -> bool:
    return status in TERMINAL_STATUSES
