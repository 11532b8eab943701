"""Admin endpoints: staff roles, invitations, sample data."""

from __future__ import annotations

import re

import structlog
from fastapi import APIRouter

from grant_portal_service.auth.deps import AdminDep, AdminResetDep, IdentityDep, IdentityProviderDep
from grant_portal_service.auth.guards import is_admin
from grant_portal_service.auth.provider import MembershipRecord
from grant_portal_service.auth.roles import ASSIGNABLE_ROLES, ROLE_DISPLAY_NAMES, resolve_role
from grant_portal_service.db.deps import OrganizationsRepoDep
from grant_portal_service.errors import InvalidInput, PortalError
from grant_portal_service.notifications import templates
from grant_portal_service.notifications.email import EmailServiceDep
from grant_portal_service.rest.schemas import (
    AdminCheckResponse,
    ApplicantInviteRequest,
    MembershipSchema,
    ResetSampleDataResponse,
    ReviewerListResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    StaffInviteRequest,
    SuccessResponse,
)
from grant_portal_service.settings import settings

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EmailDeliveryFailed(PortalError):
    status_code = 502
    default_message = "Failed to send invitation email"


def _membership_schema(record: MembershipRecord) -> MembershipSchema:
    return MembershipSchema(
        id=record.id,
        user_id=record.user_id,
        role=record.role,
        email=record.email,
        first_name=record.first_name,
        last_name=record.last_name,
        created_at=record.created_at,
    )


def _validated_role(role: str | None) -> str:
    if not role:
        raise InvalidInput("Role is required")
    if role not in ASSIGNABLE_ROLES:
        raise InvalidInput("Invalid role")
    return role


def _validated_email(email: str | None) -> str:
    if not email:
        raise InvalidInput("Email is required")
    if not _EMAIL_RE.match(email):
        raise InvalidInput("Invalid email format")
    return email


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(identity: IdentityDep) -> AdminCheckResponse:
    """Never fails: anything short of a resolved admin identity is ``false``."""
    role = resolve_role(identity, settings.identity_organization_id)
    return AdminCheckResponse(is_admin=is_admin(role))


@router.get("/users", response_model=ReviewerListResponse)
async def list_staff(caller: AdminDep, provider: IdentityProviderDep) -> ReviewerListResponse:
    members = await provider.list_organization_memberships(settings.identity_organization_id)
    return ReviewerListResponse(reviewers=[_membership_schema(m) for m in members])


@router.patch("/users/{user_id}/role", response_model=RoleUpdateResponse)
async def update_staff_role(
    user_id: str,
    request: RoleUpdateRequest,
    caller: AdminDep,
    provider: IdentityProviderDep,
) -> RoleUpdateResponse:
    role = _validated_role(request.role)
    membership = await provider.update_membership_role(
        settings.identity_organization_id, user_id, role
    )
    log.info("staff_role_changed", user_id=user_id, role=role, by=caller.external_id)
    return RoleUpdateResponse(membership=_membership_schema(membership))


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def remove_staff(
    user_id: str, caller: AdminDep, provider: IdentityProviderDep
) -> SuccessResponse:
    await provider.delete_membership(settings.identity_organization_id, user_id)
    log.info("staff_removed", user_id=user_id, by=caller.external_id)
    return SuccessResponse(message="User removed successfully")


@router.post("/users/invite", response_model=SuccessResponse)
async def invite_staff(
    request: StaffInviteRequest, caller: AdminDep, provider: IdentityProviderDep
) -> SuccessResponse:
    if not request.email or not request.role:
        raise InvalidInput("Email and role are required")
    email = _validated_email(request.email)
    role = _validated_role(ROLE_DISPLAY_NAMES.get(request.role, request.role))
    await provider.create_invitation(
        settings.identity_organization_id, email, role, inviter_user_id=caller.external_id
    )
    log.info("staff_invited", role=role, by=caller.external_id)
    return SuccessResponse(message="Invitation sent")


@router.post("/invitations", response_model=SuccessResponse)
async def invite_applicant(
    request: ApplicantInviteRequest, caller: AdminDep, email_service: EmailServiceDep
) -> SuccessResponse:
    email = _validated_email(request.email)
    sender = caller.identity.display_name or "The Foundation"
    result = await email_service.send(
        to=email,
        subject="You're Invited to Apply - Grant Portal",
        html=templates.applicant_invitation(
            sender_name=sender,
            sign_up_url=f"{settings.app_url.rstrip('/')}/sign-up",
            contact_email=settings.foundation_contact_email,
        ),
        reply_to=settings.foundation_contact_email,
    )
    if not result.success:
        raise EmailDeliveryFailed(result.error)
    log.info("applicant_invited", by=caller.external_id)
    return SuccessResponse(message="Invitation sent")


@router.post("/reset-sample-data", response_model=ResetSampleDataResponse)
async def reset_sample_data(
    repo: OrganizationsRepoDep, caller: AdminResetDep
) -> ResetSampleDataResponse:
    deleted = await repo.delete_by_eins(list(settings.sample_eins))
    log.info("sample_data_reset", deleted=deleted, by=caller.external_id)
    return ResetSampleDataResponse(deleted_count=deleted)
