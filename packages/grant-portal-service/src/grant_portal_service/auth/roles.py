"""Coarse role derivation from the membership claim."""

from __future__ import annotations

from enum import Enum

from grant_portal_service.auth.identity import Identity, Member

ADMIN_LABEL = "org:admin"
MANAGER_LABEL = "org:manager"
MEMBER_LABEL = "org:member"

ASSIGNABLE_ROLES = frozenset({ADMIN_LABEL, MANAGER_LABEL, MEMBER_LABEL})

# Display names accepted by the invite form
ROLE_DISPLAY_NAMES = {
    "Admin": ADMIN_LABEL,
    "Manager": MANAGER_LABEL,
    "Member": MEMBER_LABEL,
}


class Role(str, Enum):
    NONE = "none"
    MEMBER = "member"
    MANAGER = "manager"
    ADMIN = "admin"


def role_from_label(label: str) -> Role:
    if label == ADMIN_LABEL:
        return Role.ADMIN
    if label == MANAGER_LABEL:
        return Role.MANAGER
    if label:
        return Role.MEMBER
    return Role.NONE


def resolve_role(identity: Identity | None, organization_id: str) -> Role:
    """Derive the caller's role in *organization_id*. Never raises."""
    if identity is None:
        return Role.NONE
    claim = identity.membership_for(organization_id)
    if not isinstance(claim, Member):
        return Role.NONE
    return role_from_label(claim.role)
