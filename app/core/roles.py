# app/core/roles.py

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional


class Role(str, enum.Enum):
    lecturer = "Lecturer"
    coordinator = "ProgrammeCoordinator"
    manager = "AcademicManager"
    hr = "HR"


ROLE_LECTURER = Role.lecturer
ROLE_COORDINATOR = Role.coordinator
ROLE_MANAGER = Role.manager
ROLE_HR = Role.hr

REVIEWER_ROLES = frozenset({ROLE_COORDINATOR, ROLE_MANAGER})
SUMMARY_ROLES = frozenset({ROLE_MANAGER, ROLE_HR})


def parse_roles(values: Iterable[str]) -> FrozenSet[Role]:
    """Unknown role names from the identity provider are ignored."""
    known = {r.value: r for r in Role}
    return frozenset(known[v] for v in values if v in known)


@dataclass(frozen=True)
class Actor:
    user_id: str
    roles: FrozenSet[Role] = field(default_factory=frozenset)
    name: Optional[str] = None

    def has_any(self, roles: Iterable[Role]) -> bool:
        return bool(self.roles & frozenset(roles))
