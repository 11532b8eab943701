"""Organization profile endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import APIRouter

from grant_portal_service.auth.deps import CallerDep, ReviewerDep
from grant_portal_service.auth.guards import can_access_organization
from grant_portal_service.db.deps import (
    CyclesRepoDep,
    DocumentsRepoDep,
    OrganizationsRepoDep,
    UsersRepoDep,
)
from grant_portal_service.errors import Forbidden, InvalidInput, NotFound
from grant_portal_service.rest.schemas import (
    DocumentSchema,
    OrganizationProfileRequest,
    OrganizationSchema,
    ReviewProfileRequest,
    ReviewProfileResponse,
    profile_completion,
)

log = structlog.get_logger(__name__)

router = APIRouter()


def _profile_fields(request: OrganizationProfileRequest) -> dict[str, Any]:
    fields = request.model_dump()
    complete = profile_completion(fields) == 100
    fields["profile_complete"] = complete
    fields["profile_completed_at"] = datetime.now(UTC) if complete else None
    return fields


@router.get("/organizations")
async def get_own_organization(caller: CallerDep, repo: OrganizationsRepoDep) -> Any:
    """The caller's own organization, or ``{"organization": null}``."""
    if caller.organization_id is None:
        return {"organization": None}
    org = await repo.get(caller.organization_id)
    if org is None:
        return {"organization": None}
    return OrganizationSchema.model_validate(org).model_dump(by_alias=True, mode="json")


@router.post("/organizations", response_model=OrganizationSchema, status_code=201)
async def create_organization(
    request: OrganizationProfileRequest,
    caller: CallerDep,
    repo: OrganizationsRepoDep,
    users: UsersRepoDep,
) -> OrganizationSchema:
    if caller.organization_id is not None:
        raise InvalidInput("User already belongs to an organization")
    if await repo.get_by_ein(request.ein):
        raise InvalidInput("An organization with this EIN already exists")

    user = caller.user or await users.get_or_create(caller.identity)
    org = await repo.create_for_user(user, **_profile_fields(request))
    log.info("organization_created", organization_id=org.id, user_id=caller.external_id)
    return OrganizationSchema.model_validate(org)


@router.get("/reviewer/organizations", response_model=list[OrganizationSchema])
async def list_organizations(caller: ReviewerDep, repo: OrganizationsRepoDep) -> list[OrganizationSchema]:
    return [OrganizationSchema.model_validate(o) for o in await repo.list_all()]


@router.post("/organizations/review-profile", response_model=ReviewProfileResponse)
async def confirm_profile_reviewed(
    request: ReviewProfileRequest,
    caller: CallerDep,
    orgs: OrganizationsRepoDep,
    cycles: CyclesRepoDep,
) -> ReviewProfileResponse:
    """Record that the caller's organization reviewed its profile for a cycle."""
    if caller.organization_id is None:
        raise InvalidInput("No organization found for this user")
    if not request.cycle_id:
        raise InvalidInput("cycleId is required")
    if await cycles.get(request.cycle_id) is None:
        raise NotFound("Grant cycle not found")

    reviewed = await orgs.mark_profile_reviewed(caller.organization_id, request.cycle_id)
    if reviewed is None:
        raise NotFound("Organization not found")
    reviewed_at, cycle_id = reviewed
    log.info(
        "profile_reviewed",
        organization_id=caller.organization_id,
        cycle_id=cycle_id,
    )
    return ReviewProfileResponse(
        profile_last_reviewed_at=reviewed_at,
        profile_last_reviewed_for_cycle=cycle_id,
    )


@router.get("/organizations/{organization_id}", response_model=OrganizationSchema)
async def get_organization(
    organization_id: str, caller: CallerDep, repo: OrganizationsRepoDep
) -> OrganizationSchema:
    if not can_access_organization(caller, organization_id):
        raise Forbidden()
    org = await repo.get(organization_id)
    if org is None:
        raise NotFound("Organization not found")
    return OrganizationSchema.model_validate(org)


@router.patch("/organizations/{organization_id}", response_model=OrganizationSchema)
async def update_organization(
    organization_id: str,
    request: OrganizationProfileRequest,
    caller: CallerDep,
    repo: OrganizationsRepoDep,
) -> OrganizationSchema:
    if not can_access_organization(caller, organization_id):
        raise Forbidden()
    if not await repo.exists(organization_id):
        raise NotFound("Organization not found")
    if await repo.get_by_ein(request.ein, exclude_id=organization_id):
        raise InvalidInput("An organization with this EIN already exists")

    org = await repo.update(organization_id, **_profile_fields(request))
    log.info("organization_updated", organization_id=organization_id, user_id=caller.external_id)
    return OrganizationSchema.model_validate(org)


@router.get("/organizations/{organization_id}/documents", response_model=list[DocumentSchema])
async def list_organization_documents(
    organization_id: str,
    caller: CallerDep,
    orgs: OrganizationsRepoDep,
    documents: DocumentsRepoDep,
) -> list[DocumentSchema]:
    if not can_access_organization(caller, organization_id):
        raise Forbidden()
    if not await orgs.exists(organization_id):
        raise NotFound("Organization not found")
    return [DocumentSchema.model_validate(d) for d in await documents.list_for_organization(organization_id)]
