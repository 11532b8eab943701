"""Repository for applicant organizations."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal_service.db.models import OrganizationModel, UserModel


class OrganizationsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, organization_id: str) -> OrganizationModel | None:
        return await self._session.get(OrganizationModel, organization_id)

    async def exists(self, organization_id: str) -> bool:
        result = await self._session.execute(
            select(OrganizationModel.id).where(OrganizationModel.id == organization_id)
        )
        return result.scalar_one_or_none() is not None

    async def get_by_ein(self, ein: str, exclude_id: str | None = None) -> OrganizationModel | None:
        query = select(OrganizationModel).where(OrganizationModel.ein == ein)
        if exclude_id:
            query = query.where(OrganizationModel.id != exclude_id)
        result = await self._session.execute(query)
        return result.scalars().first()

    async def list_all(self) -> list[OrganizationModel]:
        result = await self._session.execute(
            select(OrganizationModel).order_by(OrganizationModel.legal_name)
        )
        return list(result.scalars().all())

    async def create_for_user(self, user: UserModel, **fields: Any) -> OrganizationModel:
        """Create an organization and link *user* to it in one commit."""
        org = OrganizationModel(**fields)
        self._session.add(org)
        await self._session.flush()
        user.organization_id = org.id
        await self._session.commit()
        await self._session.refresh(org)
        return org

    async def update(self, organization_id: str, **fields: Any) -> OrganizationModel | None:
        org = await self.get(organization_id)
        if org:
            for key, value in fields.items():
                if hasattr(org, key):
                    setattr(org, key, value)
            await self._session.commit()
            await self._session.refresh(org)
        return org

    async def mark_profile_reviewed(
        self, organization_id: str, cycle_id: str
    ) -> tuple[datetime, str] | None:
        """Record the review timestamp and cycle with a single UPDATE.

        Returns ``(reviewed_at, cycle_id)`` or None when the organization
        does not exist.
        """
        result = await self._session.execute(
            update(OrganizationModel)
            .where(OrganizationModel.id == organization_id)
            .values(
                profile_last_reviewed_at=datetime.now(UTC),
                profile_last_reviewed_for_cycle=cycle_id,
            )
            .returning(
                OrganizationModel.profile_last_reviewed_at,
                OrganizationModel.profile_last_reviewed_for_cycle,
            )
        )
        row = result.first()
        await self._session.commit()
        if row is None:
            return None
        return row[0], row[1]

    async def delete_by_eins(self, eins: list[str]) -> int:
        """Delete organizations whose EIN is in *eins*; returns the count.

        Dependent documents and applications go with them via the foreign
        key cascade. An empty list deletes nothing.
        """
        if not eins:
            return 0
        result = await self._session.execute(
            delete(OrganizationModel).where(OrganizationModel.ein.in_(eins))
        )
        await self._session.commit()
        return result.rowcount or 0
