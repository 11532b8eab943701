"""FastAPI dependency injection for database sessions and repositories."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal_service.db.engine import get_session_factory
from grant_portal_service.db.repositories.cycles import CyclesRepo
from grant_portal_service.db.repositories.documents import DocumentsRepo
from grant_portal_service.db.repositories.organizations import OrganizationsRepo
from grant_portal_service.db.repositories.users import UsersRepo


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async DB session, auto-closing on exit."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_cycles_repo(session: SessionDep) -> CyclesRepo:
    return CyclesRepo(session)


def get_organizations_repo(session: SessionDep) -> OrganizationsRepo:
    return OrganizationsRepo(session)


def get_documents_repo(session: SessionDep) -> DocumentsRepo:
    return DocumentsRepo(session)


def get_users_repo(session: SessionDep) -> UsersRepo:
    return UsersRepo(session)


CyclesRepoDep = Annotated[CyclesRepo, Depends(get_cycles_repo)]
OrganizationsRepoDep = Annotated[OrganizationsRepo, Depends(get_organizations_repo)]
DocumentsRepoDep = Annotated[DocumentsRepo, Depends(get_documents_repo)]
UsersRepoDep = Annotated[UsersRepo, Depends(get_users_repo)]
