"""Session endpoints: who am I, and where should the browser land."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from grant_portal_service.auth.deps import CallerDep, IdentityDep
from grant_portal_service.auth.guards import is_admin, is_manager, is_reviewer
from grant_portal_service.auth.roles import resolve_role
from grant_portal_service.auth.routing import SIGN_IN_PATH, landing_page, page_redirect
from grant_portal_service.rest.schemas import MeResponse, PageAccessResponse
from grant_portal_service.settings import settings

# Mounted under /api
router = APIRouter()

# Mounted at the root; browser navigation, answers with redirects
pages_router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def me(caller: CallerDep) -> MeResponse:
    """Return information about the currently authenticated caller."""
    return MeResponse(
        external_id=caller.external_id,
        email=caller.identity.email,
        name=caller.identity.display_name,
        role=caller.role.value,
        organization_id=caller.organization_id,
        is_reviewer=is_reviewer(caller),
        is_manager=is_manager(caller),
        is_admin=is_admin(caller),
    )


@router.get("/page-access", response_model=PageAccessResponse)
async def page_access(path: str, identity: IdentityDep) -> PageAccessResponse:
    role = resolve_role(identity, settings.identity_organization_id)
    target = page_redirect(path, role, authenticated=identity is not None)
    return PageAccessResponse(allowed=target is None, redirect=target)


@pages_router.get("/auth/redirect", include_in_schema=False)
async def auth_redirect(identity: IdentityDep) -> RedirectResponse:
    """Send a freshly signed-in browser to its dashboard."""
    if identity is None:
        return RedirectResponse(SIGN_IN_PATH)
    role = resolve_role(identity, settings.identity_organization_id)
    return RedirectResponse(landing_page(role))
