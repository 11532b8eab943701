"""Repository for local user records keyed by identity-provider id."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal_service.auth.identity import Identity
from grant_portal_service.db.models import UserModel


class UsersRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_external_id(self, external_id: str) -> UserModel | None:
        result = await self._session.execute(
            select(UserModel).where(UserModel.external_id == external_id)
        )
        return result.scalars().first()

    async def get_or_create(self, identity: Identity) -> UserModel:
        """Return the local user for *identity*, creating it on first sight."""
        user = await self.get_by_external_id(identity.external_id)
        if user is not None:
            return user
        user = UserModel(
            external_id=identity.external_id,
            email=identity.email,
            first_name=identity.first_name or None,
            last_name=identity.last_name or None,
        )
        self._session.add(user)
        await self._session.commit()
        await self._session.refresh(user)
        return user
