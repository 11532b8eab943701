"""Role resolution and guard predicate tests."""

from __future__ import annotations

import pytest

from grant_portal_service.auth.guards import (
    can_access_organization,
    can_modify_organization_documents,
    is_admin,
    is_manager,
    is_reviewer,
)
from grant_portal_service.auth.identity import Identity, Member
from grant_portal_service.auth.models import Caller
from grant_portal_service.auth.roles import Role, resolve_role, role_from_label
from grant_portal_service.db.models import UserModel

ORG = "org_foundation"


def _identity(*memberships: Member) -> Identity:
    return Identity(external_id="user_1", email="u@example.com", memberships=tuple(memberships))


# ---------------------------------------------------------------------------
# resolve_role
# ---------------------------------------------------------------------------


def test_no_identity_is_none():
    assert resolve_role(None, ORG) is Role.NONE


def test_no_memberships_is_none():
    assert resolve_role(_identity(), ORG) is Role.NONE


def test_membership_in_other_org_is_none():
    assert resolve_role(_identity(Member("org_elsewhere", "org:admin")), ORG) is Role.NONE


@pytest.mark.parametrize(
    "label, expected",
    [
        ("org:admin", Role.ADMIN),
        ("org:manager", Role.MANAGER),
        ("org:member", Role.MEMBER),
        ("org:billing", Role.MEMBER),
        ("basic_member", Role.MEMBER),
        ("", Role.NONE),
    ],
)
def test_label_mapping(label, expected):
    assert role_from_label(label) is expected
    assert resolve_role(_identity(Member(ORG, label)), ORG) is expected


def test_first_membership_for_org_wins():
    """Single-membership assumption: duplicate entries are not merged.

    The first entry for the organization decides the role even when a later
    duplicate carries a higher one.
    """
    identity = _identity(Member(ORG, "org:member"), Member(ORG, "org:admin"))
    assert resolve_role(identity, ORG) is Role.MEMBER


def test_memberships_in_other_orgs_are_skipped():
    identity = _identity(Member("org_elsewhere", "org:member"), Member(ORG, "org:admin"))
    assert resolve_role(identity, ORG) is Role.ADMIN


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "role, reviewer, manager, admin",
    [
        (Role.NONE, False, False, False),
        (Role.MEMBER, True, False, False),
        (Role.MANAGER, True, True, False),
        (Role.ADMIN, True, True, True),
    ],
)
def test_guard_matrix(role, reviewer, manager, admin):
    assert is_reviewer(role) is reviewer
    assert is_manager(role) is manager
    assert is_admin(role) is admin


def test_guards_are_monotonic():
    order = [Role.NONE, Role.MEMBER, Role.MANAGER, Role.ADMIN]
    for guard in (is_reviewer, is_manager, is_admin):
        results = [guard(r) for r in order]
        # once granted, every higher role keeps it
        assert results == sorted(results)


def test_guards_accept_caller_and_none():
    caller = Caller(identity=_identity(), role=Role.MANAGER)
    assert is_manager(caller)
    assert not is_admin(caller)
    assert not is_reviewer(None)


def test_guards_are_repeatable():
    caller = Caller(identity=_identity(), role=Role.ADMIN)
    assert [is_admin(caller) for _ in range(3)] == [True, True, True]


def _applicant(org_id: str | None) -> Caller:
    user = UserModel(external_id="user_1", email="u@example.com", organization_id=org_id)
    return Caller(identity=_identity(), role=Role.NONE, user=user)


def test_applicant_can_access_own_org_only():
    caller = _applicant("org-a")
    assert can_access_organization(caller, "org-a")
    assert not can_access_organization(caller, "org-b")


def test_applicant_without_org_or_user_is_denied():
    assert not can_access_organization(_applicant(None), "org-a")
    assert not can_access_organization(Caller(identity=_identity(), role=Role.NONE), "org-a")


def test_reviewer_can_access_any_org():
    caller = Caller(identity=_identity(), role=Role.MEMBER)
    assert can_access_organization(caller, "org-b")


def test_document_modification_rules():
    assert can_modify_organization_documents(_applicant("org-a"), "org-a")
    assert not can_modify_organization_documents(_applicant("org-a"), "org-b")
    assert not can_modify_organization_documents(_applicant("org-a"), None)
    assert not can_modify_organization_documents(
        Caller(identity=_identity(), role=Role.MEMBER), "org-a"
    )
    assert can_modify_organization_documents(
        Caller(identity=_identity(), role=Role.MANAGER), "org-a"
    )
