"""Auth domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from grant_portal_service.auth.identity import Identity
from grant_portal_service.auth.roles import Role


@dataclass(frozen=True)
class Caller:
    """Per-request caller context handed explicitly to guards and handlers."""

    identity: Identity
    role: Role
    user: Any = None  # local UserModel, absent until the applicant first signs in

    @property
    def external_id(self) -> str:
        return self.identity.external_id

    @property
    def organization_id(self) -> str | None:
        if self.user is None:
            return None
        return self.user.organization_id
