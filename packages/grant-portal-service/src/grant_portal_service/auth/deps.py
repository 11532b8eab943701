"""FastAPI auth dependencies.

FastAPI caches a dependency's result for the lifetime of one request, so the
identity provider is consulted at most once per request no matter how many
guards a route stacks.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request

from grant_portal_service.auth.guards import is_admin, is_manager, is_reviewer
from grant_portal_service.auth.identity import Identity
from grant_portal_service.auth.models import Caller
from grant_portal_service.auth.provider import IdentityProvider
from grant_portal_service.auth.roles import resolve_role
from grant_portal_service.db.deps import UsersRepoDep
from grant_portal_service.errors import Forbidden, Unauthenticated
from grant_portal_service.settings import settings

SESSION_COOKIE = "__session"


def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()


IdentityProviderDep = Annotated[IdentityProvider, Depends(get_identity_provider)]


def session_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer":
        return credentials.strip() or None
    return request.cookies.get(SESSION_COOKIE) or None


async def get_identity(request: Request, provider: IdentityProviderDep) -> Identity | None:
    """Resolve the caller's identity, or None when there is no valid session."""
    token = session_token(request)
    if token is None:
        return None
    return await provider.resolve(token)


IdentityDep = Annotated[Identity | None, Depends(get_identity)]


async def get_caller(identity: IdentityDep, users: UsersRepoDep) -> Caller:
    """Build the explicit caller context; raises Unauthenticated without a session."""
    if identity is None:
        raise Unauthenticated()
    role = resolve_role(identity, settings.identity_organization_id)
    user = await users.get_by_external_id(identity.external_id)
    return Caller(identity=identity, role=role, user=user)


CallerDep = Annotated[Caller, Depends(get_caller)]


def require(guard: Callable[[Caller], bool], message: str = "Forbidden"):
    """Dependency factory that enforces a guard predicate on the caller."""

    async def _check(caller: CallerDep) -> Caller:
        if not guard(caller):
            raise Forbidden(message)
        return caller

    return Depends(_check)


ReviewerDep = Annotated[Caller, require(is_reviewer)]
ManagerDep = Annotated[Caller, require(is_manager)]
AdminDep = Annotated[Caller, require(is_admin)]
AdminResetDep = Annotated[Caller, require(is_admin, "Only admins can reset data")]
