"""Access guard predicates.

Each predicate accepts either a ``Role`` or a ``Caller`` and returns a bool.
They never raise; turning ``False`` into a 403 or a redirect is the caller's
job (see ``auth.deps`` and ``auth.routing``).
"""

from __future__ import annotations

from grant_portal_service.auth.models import Caller
from grant_portal_service.auth.roles import Role


def _role(subject: Role | Caller | None) -> Role:
    if subject is None:
        return Role.NONE
    if isinstance(subject, Caller):
        return subject.role
    return subject


def is_reviewer(subject: Role | Caller | None) -> bool:
    return _role(subject) is not Role.NONE


def is_manager(subject: Role | Caller | None) -> bool:
    return _role(subject) in (Role.MANAGER, Role.ADMIN)


def is_admin(subject: Role | Caller | None) -> bool:
    return _role(subject) is Role.ADMIN


def can_access_organization(caller: Caller, organization_id: str | None) -> bool:
    """Staff can see every organization; applicants only their own."""
    if is_reviewer(caller):
        return True
    return caller.organization_id is not None and caller.organization_id == organization_id


def can_modify_organization_documents(caller: Caller, organization_id: str | None) -> bool:
    if is_manager(caller):
        return True
    return (
        organization_id is not None
        and not is_reviewer(caller)
        and caller.organization_id == organization_id
    )
