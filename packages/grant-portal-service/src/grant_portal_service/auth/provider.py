"""HTTP adapter for the external identity provider.

Resolves the caller behind a session token and performs the organization
membership operations staff administration needs. Raw provider JSON is
parsed into ``auth.identity`` types here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import jwt
import structlog

from grant_portal_service.auth.identity import Identity, MalformedClaim, parse_identity
from grant_portal_service.auth.jwt import decode_session_token
from grant_portal_service.settings import settings

log = structlog.get_logger(__name__)


class IdentityProviderError(Exception):
    """A management call to the identity provider failed.

    ``user_message`` is set only when the provider returned a validation
    message that is safe to show to the caller.
    """

    def __init__(self, message: str, status_code: int | None = None, user_message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.user_message = user_message


@dataclass(frozen=True)
class MembershipRecord:
    id: str
    organization_id: str
    user_id: str
    role: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    created_at: int | None = None  # epoch millis, as reported


def _parse_membership_record(raw: Any) -> MembershipRecord:
    if not isinstance(raw, dict):
        raise MalformedClaim("membership record is not an object")
    org = raw.get("organization") or {}
    public = raw.get("public_user_data") or {}
    user_id = public.get("user_id") or raw.get("user_id")
    if not isinstance(user_id, str):
        raise MalformedClaim("membership record has no user id")
    return MembershipRecord(
        id=str(raw.get("id", "")),
        organization_id=str(org.get("id", "")) if isinstance(org, dict) else "",
        user_id=user_id,
        role=str(raw.get("role") or ""),
        email=public.get("identifier") or "",
        first_name=public.get("first_name") or "",
        last_name=public.get("last_name") or "",
        created_at=raw.get("created_at"),
    )


def _first_error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        message = errors[0].get("message")
        if isinstance(message, str) and message:
            return message
    return None


class IdentityProvider:
    """Async client for the identity provider's backend API."""

    def __init__(
        self,
        api_url: str | None = None,
        secret_key: str | None = None,
        jwt_key: str | None = None,
        jwt_algorithm: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._api_url = (api_url or settings.identity_api_url).rstrip("/")
        self._secret_key = secret_key if secret_key is not None else settings.identity_secret_key
        self._jwt_key = jwt_key
        self._jwt_algorithm = jwt_algorithm
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._api_url,
            headers={"Authorization": f"Bearer {self._secret_key}"},
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with self._client() as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.error("identity_provider_unreachable", method=method, path=path, error=str(exc))
            raise IdentityProviderError(f"Identity provider request failed: {exc}") from exc

        if resp.status_code >= 400:
            user_message = _first_error_message(resp) if resp.status_code < 500 else None
            log.warning(
                "identity_provider_error",
                method=method,
                path=path,
                status=resp.status_code,
                message=user_message,
            )
            raise IdentityProviderError(
                f"Identity provider returned {resp.status_code}",
                status_code=resp.status_code,
                user_message=user_message,
            )
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ------------------------------------------------------------------
    # Caller resolution
    # ------------------------------------------------------------------

    async def resolve(self, token: str) -> Identity | None:
        """Return the identity behind *token*, or None.

        Every failure mode collapses to None so callers only ever see
        "unauthenticated".
        """
        try:
            claims = decode_session_token(token, key=self._jwt_key, algorithm=self._jwt_algorithm)
        except jwt.PyJWTError as exc:
            log.info("session_token_rejected", error=str(exc))
            return None

        user_id = claims["sub"]
        try:
            user = await self._request("GET", f"/users/{user_id}")
            memberships = await self._request(
                "GET", f"/users/{user_id}/organization_memberships", params={"limit": 100}
            )
            return parse_identity(user, memberships)
        except (IdentityProviderError, MalformedClaim, ValueError) as exc:
            log.warning("identity_resolution_failed", user_id=user_id, error=str(exc))
            return None

    # ------------------------------------------------------------------
    # Membership administration
    # ------------------------------------------------------------------

    async def list_organization_memberships(
        self, organization_id: str, limit: int = 100
    ) -> list[MembershipRecord]:
        body = await self._request(
            "GET", f"/organizations/{organization_id}/memberships", params={"limit": limit}
        )
        rows = body.get("data", []) if isinstance(body, dict) else body or []
        try:
            return [_parse_membership_record(r) for r in rows]
        except MalformedClaim as exc:
            raise IdentityProviderError(f"Malformed membership list: {exc}") from exc

    async def update_membership_role(
        self, organization_id: str, user_id: str, role: str
    ) -> MembershipRecord:
        body = await self._request(
            "PATCH",
            f"/organizations/{organization_id}/memberships/{user_id}",
            json={"role": role},
        )
        log.info("membership_role_updated", organization_id=organization_id, user_id=user_id, role=role)
        try:
            return _parse_membership_record(body)
        except MalformedClaim as exc:
            raise IdentityProviderError(f"Malformed membership: {exc}") from exc

    async def delete_membership(self, organization_id: str, user_id: str) -> None:
        await self._request("DELETE", f"/organizations/{organization_id}/memberships/{user_id}")
        log.info("membership_deleted", organization_id=organization_id, user_id=user_id)

    async def create_invitation(
        self, organization_id: str, email: str, role: str, inviter_user_id: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"email_address": email, "role": role}
        if inviter_user_id:
            payload["inviter_user_id"] = inviter_user_id
        body = await self._request(
            "POST", f"/organizations/{organization_id}/invitations", json=payload
        )
        log.info("organization_invitation_created", organization_id=organization_id, role=role)
        return body if isinstance(body, dict) else {}
