"""Service test fixtures with in-memory fake repos and identity provider."""

from __future__ import annotations

import os

# Required settings must exist before the service modules are imported.
os.environ.setdefault("GRANTS_IDENTITY_ORGANIZATION_ID", "org_foundation")
os.environ.setdefault("GRANTS_FOUNDATION_CONTACT_EMAIL", "grants@foundation.example")

import uuid  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from grant_portal_service.auth.deps import get_identity_provider  # noqa: E402
from grant_portal_service.auth.identity import Identity, Member  # noqa: E402
from grant_portal_service.auth.provider import IdentityProviderError, MembershipRecord  # noqa: E402
from grant_portal_service.db.deps import (  # noqa: E402
    get_cycles_repo,
    get_documents_repo,
    get_organizations_repo,
    get_session,
    get_users_repo,
)
from grant_portal_service.db.models import (  # noqa: E402
    ApplicationModel,
    DocumentModel,
    GrantCycleConfigModel,
    OrganizationModel,
    UserModel,
)
from grant_portal_service.notifications.email import EmailResult, get_email_service  # noqa: E402
from grant_portal_service.rest.app import include_routes  # noqa: E402
from grant_portal_service.rest.errors import install_error_handlers  # noqa: E402

ORG_ID = os.environ["GRANTS_IDENTITY_ORGANIZATION_ID"]


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------


def make_identity(external_id: str, *roles: str, org_id: str = ORG_ID, email: str = "") -> Identity:
    return Identity(
        external_id=external_id,
        email=email or f"{external_id}@example.com",
        first_name=external_id.title(),
        last_name="Tester",
        memberships=tuple(Member(organization_id=org_id, role=r) for r in roles),
    )


IDENTITIES = {
    "admin-token": make_identity("admin", "org:admin"),
    "manager-token": make_identity("manager", "org:manager"),
    "member-token": make_identity("member", "org:member"),
    "applicant-token": make_identity("applicant"),
    "other-applicant-token": make_identity("other"),
    "homeless-token": make_identity("homeless"),
}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class FakeIdentityProvider:
    """Token-to-identity lookup plus recorded membership operations."""

    def __init__(self, identities: dict[str, Identity]):
        self.identities = dict(identities)
        self.resolve_calls = 0
        self.calls: list[tuple[Any, ...]] = []
        self.memberships: list[MembershipRecord] = []
        self.error: IdentityProviderError | None = None

    async def resolve(self, token: str) -> Identity | None:
        self.resolve_calls += 1
        return self.identities.get(token)

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    async def list_organization_memberships(self, organization_id: str, limit: int = 100):
        self.calls.append(("list", organization_id))
        self._maybe_fail()
        return [m for m in self.memberships if m.organization_id == organization_id]

    async def update_membership_role(self, organization_id: str, user_id: str, role: str):
        self.calls.append(("update_role", organization_id, user_id, role))
        self._maybe_fail()
        return MembershipRecord(
            id=f"mem_{user_id}", organization_id=organization_id, user_id=user_id, role=role
        )

    async def delete_membership(self, organization_id: str, user_id: str) -> None:
        self.calls.append(("delete", organization_id, user_id))
        self._maybe_fail()

    async def create_invitation(self, organization_id: str, email: str, role: str, inviter_user_id=None):
        self.calls.append(("invite", organization_id, email, role))
        self._maybe_fail()
        return {"id": "inv_1", "email_address": email, "role": role}


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


def make_cycle(**overrides: Any) -> GrantCycleConfigModel:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "cycle": "SPRING",
        "year": 2026,
        "loi_open_date": now,
        "loi_deadline": now,
        "full_app_open_date": None,
        "full_app_deadline": None,
        "max_request_amount": 25000,
        "is_active": True,
        "accepting_lois": True,
        "accepting_applications": False,
        "internal_notes": "board prefers youth programs",
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return GrantCycleConfigModel(**values)


def make_org(**overrides: Any) -> OrganizationModel:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "legal_name": "Omaha Youth Services",
        "ein": "12-3456789",
        "profile_complete": False,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return OrganizationModel(**values)


def make_document(organization_id: str | None, **overrides: Any) -> DocumentModel:
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "organization_id": organization_id,
        "scope": "ORGANIZATION",
        "type": "IRS_DETERMINATION",
        "name": "IRS letter",
        "file_name": "irs.pdf",
        "file_url": "https://blob.example/irs.pdf",
        "file_size": 1024,
        "mime_type": "application/pdf",
        "document_year": 2025,
        "uploaded_at": datetime.now(UTC),
    }
    values.update(overrides)
    return DocumentModel(**values)


def make_application(organization_id: str, **overrides: Any) -> ApplicationModel:
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "organization_id": organization_id,
        "status": "DRAFT",
        "project_title": "After-school arts",
    }
    values.update(overrides)
    return ApplicationModel(**values)


class InMemoryCyclesRepo:
    def __init__(self):
        self._cycles: dict[str, GrantCycleConfigModel] = {}

    def add(self, cycle: GrantCycleConfigModel) -> GrantCycleConfigModel:
        self._cycles[cycle.id] = cycle
        return cycle

    async def get(self, cycle_id):
        return self._cycles.get(cycle_id)

    async def get_by_cycle_year(self, cycle, year):
        return next(
            (c for c in self._cycles.values() if c.cycle == cycle and c.year == year), None
        )

    async def list_open(self):
        return sorted(
            (c for c in self._cycles.values() if c.is_active and c.accepting_lois),
            key=lambda c: (-c.year, c.cycle),
        )

    async def list_all(self):
        return sorted(self._cycles.values(), key=lambda c: (-c.year, c.cycle))

    async def create(self, **kwargs):
        now = datetime.now(UTC)
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        return self.add(make_cycle(**kwargs))

    async def update(self, cycle_id, **fields):
        cycle = self._cycles.get(cycle_id)
        if cycle is None:
            return None
        if fields.get("is_active") is True:
            for other in self._cycles.values():
                if other.id != cycle_id:
                    other.is_active = False
        for key, value in fields.items():
            if value is not None:
                setattr(cycle, key, value)
        return cycle


class InMemoryOrganizationsRepo:
    def __init__(self):
        self._orgs: dict[str, OrganizationModel] = {}
        self.review_updates = 0

    def add(self, org: OrganizationModel) -> OrganizationModel:
        self._orgs[org.id] = org
        return org

    async def get(self, organization_id):
        return self._orgs.get(organization_id)

    async def exists(self, organization_id):
        return organization_id in self._orgs

    async def get_by_ein(self, ein, exclude_id=None):
        return next(
            (o for o in self._orgs.values() if o.ein == ein and o.id != exclude_id), None
        )

    async def list_all(self):
        return sorted(self._orgs.values(), key=lambda o: o.legal_name)

    async def create_for_user(self, user, **fields):
        org = self.add(make_org(**fields))
        user.organization_id = org.id
        return org

    async def update(self, organization_id, **fields):
        org = self._orgs.get(organization_id)
        if org:
            for key, value in fields.items():
                setattr(org, key, value)
        return org

    async def mark_profile_reviewed(self, organization_id, cycle_id):
        org = self._orgs.get(organization_id)
        if org is None:
            return None
        self.review_updates += 1
        org.profile_last_reviewed_at = datetime.now(UTC)
        org.profile_last_reviewed_for_cycle = cycle_id
        return org.profile_last_reviewed_at, org.profile_last_reviewed_for_cycle

    async def delete_by_eins(self, eins):
        doomed = [o.id for o in self._orgs.values() if o.ein in set(eins)]
        for org_id in doomed:
            del self._orgs[org_id]
        return len(doomed)


class InMemoryDocumentsRepo:
    def __init__(self):
        self._docs: dict[str, DocumentModel] = {}
        self._applications: dict[str, ApplicationModel] = {}

    def add(self, doc: DocumentModel) -> DocumentModel:
        self._docs[doc.id] = doc
        return doc

    async def get(self, document_id):
        return self._docs.get(document_id)

    async def list_for_organization(self, organization_id):
        docs = [
            d for d in self._docs.values()
            if d.organization_id == organization_id and d.scope == "ORGANIZATION"
        ]
        docs.sort(key=lambda d: d.uploaded_at, reverse=True)
        docs.sort(key=lambda d: -(d.document_year or 0))
        docs.sort(key=lambda d: d.type)
        return docs

    async def list_for_application(self, application_id):
        docs = [d for d in self._docs.values() if d.application_id == application_id]
        return sorted(docs, key=lambda d: d.uploaded_at, reverse=True)

    def add_application(self, application: ApplicationModel) -> ApplicationModel:
        self._applications[application.id] = application
        return application

    async def get_application(self, application_id):
        return self._applications.get(application_id)

    async def delete(self, document_id):
        return self._docs.pop(document_id, None) is not None


class InMemoryUsersRepo:
    def __init__(self):
        self._users: dict[str, UserModel] = {}

    def add(self, external_id: str, organization_id: str | None = None) -> UserModel:
        user = UserModel(
            id=str(uuid.uuid4()),
            external_id=external_id,
            email=f"{external_id}@example.com",
            organization_id=organization_id,
        )
        self._users[external_id] = user
        return user

    async def get_by_external_id(self, external_id):
        return self._users.get(external_id)

    async def get_or_create(self, identity):
        return self._users.get(identity.external_id) or self.add(identity.external_id)


class FakeEmailService:
    def __init__(self):
        self.sent: list[dict[str, Any]] = []
        self.result = EmailResult(success=True, id="email_1")

    async def send(self, to, subject, html, reply_to=None):
        self.sent.append({"to": to, "subject": subject, "html": html, "reply_to": reply_to})
        return self.result


# ---------------------------------------------------------------------------
# App fixture
# ---------------------------------------------------------------------------


@dataclass
class Portal:
    client: TestClient
    provider: FakeIdentityProvider
    cycles: InMemoryCyclesRepo
    orgs: InMemoryOrganizationsRepo
    documents: InMemoryDocumentsRepo
    users: InMemoryUsersRepo
    email: FakeEmailService
    session: Any = field(default=None)


@pytest.fixture
def portal() -> Portal:
    """Full route table over in-memory fakes (no database, no network)."""
    app = FastAPI(title="Grant Portal API (test)")
    install_error_handlers(app)
    include_routes(app)

    provider = FakeIdentityProvider(IDENTITIES)
    cycles = InMemoryCyclesRepo()
    orgs = InMemoryOrganizationsRepo()
    documents = InMemoryDocumentsRepo()
    users = InMemoryUsersRepo()
    email = FakeEmailService()
    session = AsyncMock()

    app.dependency_overrides[get_identity_provider] = lambda: provider
    app.dependency_overrides[get_cycles_repo] = lambda: cycles
    app.dependency_overrides[get_organizations_repo] = lambda: orgs
    app.dependency_overrides[get_documents_repo] = lambda: documents
    app.dependency_overrides[get_users_repo] = lambda: users
    app.dependency_overrides[get_email_service] = lambda: email
    app.dependency_overrides[get_session] = lambda: session

    return Portal(
        client=TestClient(app),
        provider=provider,
        cycles=cycles,
        orgs=orgs,
        documents=documents,
        users=users,
        email=email,
        session=session,
    )


@pytest.fixture
def applicant_org(portal: Portal) -> OrganizationModel:
    """An organization owned by the ``applicant`` identity."""
    org = portal.orgs.add(make_org())
    portal.users.add("applicant", organization_id=org.id)
    return org


@pytest.fixture
def other_org(portal: Portal) -> OrganizationModel:
    """An organization owned by the ``other`` identity."""
    org = portal.orgs.add(make_org(legal_name="Lincoln Food Bank", ein="98-7654321"))
    portal.users.add("other", organization_id=org.id)
    return org
