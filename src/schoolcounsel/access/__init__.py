"""
Access Control Module

Role, ownership and tenant gates driven by a single policy table.
"""

from .policy import (
    POLICY,
    Action,
    Relation,
    Resource,
    ResourceRef,
    allowed_roles,
    authorize,
    is_authorized,
    ownership_gate,
    role_gate,
    tenant_gate,
)
from .principal import Principal, Role

__all__ = [
    "POLICY",
    "Action",
    "Principal",
    "Relation",
    "Resource",
    "ResourceRef",
    "Role",
    "allowed_roles",
    "authorize",
    "is_authorized",
    "ownership_gate",
    "role_gate",
    "tenant_gate",
]
