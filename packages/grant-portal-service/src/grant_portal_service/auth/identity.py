"""Identity and membership claim types.

Provider payloads are parsed into these types inside ``auth.provider``; code
outside the adapter only ever sees ``Identity`` and the membership variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NoMembership:
    """The identity holds no membership in the organization asked about."""


NO_MEMBERSHIP = NoMembership()


@dataclass(frozen=True)
class Member:
    organization_id: str
    role: str  # provider role label, e.g. "org:admin"


MembershipClaim = NoMembership | Member


@dataclass(frozen=True)
class Identity:
    external_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    memberships: tuple[Member, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def membership_for(self, organization_id: str) -> MembershipClaim:
        """Return the first membership for *organization_id*, if any.

        Duplicate memberships in the same organization are not merged; the
        first entry in provider order wins.
        """
        for member in self.memberships:
            if member.organization_id == organization_id:
                return member
        return NO_MEMBERSHIP


class MalformedClaim(ValueError):
    """A provider payload did not have the expected shape."""


def parse_membership(raw: Any) -> Member:
    """Parse one provider membership object into a ``Member``."""
    if not isinstance(raw, dict):
        raise MalformedClaim("membership entry is not an object")
    org = raw.get("organization")
    org_id = org.get("id") if isinstance(org, dict) else raw.get("organization_id")
    role = raw.get("role")
    if not isinstance(org_id, str) or not org_id:
        raise MalformedClaim("membership entry has no organization id")
    if role is not None and not isinstance(role, str):
        raise MalformedClaim("membership role is not a string")
    return Member(organization_id=org_id, role=role or "")


def parse_identity(user: Any, memberships: Any) -> Identity:
    """Build an ``Identity`` from a provider user object and membership list."""
    if not isinstance(user, dict) or not isinstance(user.get("id"), str):
        raise MalformedClaim("user payload has no id")

    email = ""
    addresses = user.get("email_addresses") or []
    primary_id = user.get("primary_email_address_id")
    for address in addresses:
        if not isinstance(address, dict):
            continue
        if not email or address.get("id") == primary_id:
            email = address.get("email_address") or email

    if isinstance(memberships, dict):
        memberships = memberships.get("data", [])
    if not isinstance(memberships, list):
        raise MalformedClaim("membership list is not an array")

    return Identity(
        external_id=user["id"],
        email=email,
        first_name=user.get("first_name") or "",
        last_name=user.get("last_name") or "",
        memberships=tuple(parse_membership(m) for m in memberships),
    )
