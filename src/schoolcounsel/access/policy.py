"""
Access Control Policy

All authorization decisions go through :func:`authorize`, which looks up the
(resource, action) pair in :data:`POLICY` and applies, in order:

1. the role gate: the caller's role must appear in the entry,
2. every relation listed for that role (ownership and/or tenant gate).

The gates are pure functions of (principal, resource reference). They never
touch the database; callers load whatever record they need first and describe
it with a :class:`ResourceRef`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from schoolcounsel.core.errors import Forbidden

from .principal import Principal, Role


class Resource(StrEnum):
    PROFILE = "profile"
    PROFILE_SECTION = "profile_section"
    ASSESSMENT = "assessment"
    ASSESSMENT_STATS = "assessment_stats"
    COUNSELOR_ASSESSMENTS = "counselor_assessments"
    APPOINTMENT = "appointment"
    COUNSELOR_DIRECTORY = "counselor_directory"
    STUDENT_DIRECTORY = "student_directory"
    STUDENT_ROSTER = "student_roster"


class Action(StrEnum):
    CREATE = "create"
    READ = "read"
    LIST = "list"
    UPDATE = "update"
    DELETE = "delete"


class Relation(StrEnum):
    """How the caller must relate to the resource."""

    ANY = "any"
    OWNER = "owner"  # caller id is one of the resource's owner ids
    TENANT = "tenant"  # caller's school is the resource's school


@dataclass(frozen=True)
class ResourceRef:
    """What the gates need to know about a resource."""

    owner_ids: frozenset[UUID] = field(default_factory=frozenset)
    school_id: UUID | None = None

    @classmethod
    def owned_by(cls, *owner_ids: UUID, school_id: UUID | None = None) -> ResourceRef:
        return cls(owner_ids=frozenset(owner_ids), school_id=school_id)

    @classmethod
    def in_school(cls, school_id: UUID) -> ResourceRef:
        return cls(school_id=school_id)


Rule = dict[Role, tuple[Relation, ...]]

_ANY = (Relation.ANY,)
_OWNER = (Relation.OWNER,)
_TENANT = (Relation.TENANT,)

# resource-type x role x relation
POLICY: dict[tuple[Resource, Action], Rule] = {
    # Student profile
    (Resource.PROFILE_SECTION, Action.UPDATE): {Role.STUDENT: _OWNER},
    (Resource.PROFILE, Action.READ): {
        Role.STUDENT: _OWNER,
        Role.STAFF: _TENANT,
        Role.ADMIN: _TENANT,
    },
    # Assessments
    (Resource.ASSESSMENT, Action.CREATE): {Role.STAFF: _TENANT, Role.ADMIN: _TENANT},
    (Resource.ASSESSMENT, Action.READ): {Role.STAFF: _TENANT, Role.ADMIN: _TENANT},
    (Resource.ASSESSMENT, Action.UPDATE): {Role.STAFF: _TENANT, Role.ADMIN: _TENANT},
    (Resource.ASSESSMENT, Action.LIST): {Role.ADMIN: _TENANT},
    (Resource.ASSESSMENT_STATS, Action.READ): {Role.STAFF: _TENANT, Role.ADMIN: _TENANT},
    (Resource.COUNSELOR_ASSESSMENTS, Action.LIST): {
        Role.STAFF: (Relation.OWNER, Relation.TENANT),
        Role.ADMIN: _TENANT,
    },
    # Appointments
    (Resource.APPOINTMENT, Action.CREATE): {Role.STAFF: _TENANT},
    (Resource.APPOINTMENT, Action.LIST): {Role.STAFF: _ANY, Role.STUDENT: _ANY},
    (Resource.APPOINTMENT, Action.READ): {Role.STAFF: _OWNER, Role.STUDENT: _OWNER},
    (Resource.APPOINTMENT, Action.UPDATE): {Role.STAFF: _OWNER, Role.STUDENT: _OWNER},
    (Resource.APPOINTMENT, Action.DELETE): {Role.STAFF: _OWNER, Role.STUDENT: _OWNER},
    # School directory
    (Resource.COUNSELOR_DIRECTORY, Action.LIST): {Role.ADMIN: _TENANT, Role.STAFF: _TENANT},
    (Resource.COUNSELOR_DIRECTORY, Action.READ): {Role.ADMIN: _TENANT},
    (Resource.STUDENT_DIRECTORY, Action.LIST): {Role.ADMIN: _TENANT},
    (Resource.STUDENT_DIRECTORY, Action.READ): {Role.ADMIN: _TENANT},
    (Resource.STUDENT_ROSTER, Action.LIST): {Role.STAFF: (Relation.OWNER, Relation.TENANT)},
    (Resource.STUDENT_ROSTER, Action.READ): {Role.STAFF: (Relation.OWNER, Relation.TENANT)},
}


# ============================================================================
# Gates
# ============================================================================


def role_gate(principal: Principal, allowed: Iterable[Role]) -> None:
    if principal.role not in set(allowed):
        raise Forbidden("Access denied. Insufficient permissions.")


def ownership_gate(principal: Principal, ref: ResourceRef) -> None:
    if principal.id not in ref.owner_ids:
        raise Forbidden("Access denied. You can only access your own resources.")


def tenant_gate(principal: Principal, ref: ResourceRef) -> None:
    if ref.school_id is None or principal.school_id != ref.school_id:
        raise Forbidden("Access denied. You can only access data from your school.")


_RELATION_GATES = {
    Relation.OWNER: ownership_gate,
    Relation.TENANT: tenant_gate,
}


def allowed_roles(resource: Resource, action: Action) -> frozenset[Role]:
    return frozenset(POLICY.get((resource, action), {}))


def authorize(
    principal: Principal,
    resource: Resource,
    action: Action,
    ref: ResourceRef | None = None,
) -> None:
    """Raise ``Forbidden`` unless the policy table lets ``principal`` do this.

    Unknown (resource, action) pairs are denied.
    """
    rule = POLICY.get((resource, action), {})
    role_gate(principal, rule)

    ref = ref or ResourceRef()
    for relation in rule[principal.role]:
        gate = _RELATION_GATES.get(relation)
        if gate is not None:
            gate(principal, ref)


def is_authorized(
    principal: Principal,
    resource: Resource,
    action: Action,
    ref: ResourceRef | None = None,
) -> bool:
    try:
        authorize(principal, resource, action, ref)
    except Forbidden:
        return False
    return True
