"""Repository for grant cycle configuration."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal_service.db.models import GrantCycleConfigModel

_ORDERING = (GrantCycleConfigModel.year.desc(), GrantCycleConfigModel.cycle.asc())


class CyclesRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, cycle_id: str) -> GrantCycleConfigModel | None:
        return await self._session.get(GrantCycleConfigModel, cycle_id)

    async def get_by_cycle_year(self, cycle: str, year: int) -> GrantCycleConfigModel | None:
        result = await self._session.execute(
            select(GrantCycleConfigModel).where(
                GrantCycleConfigModel.cycle == cycle,
                GrantCycleConfigModel.year == year,
            )
        )
        return result.scalars().first()

    async def list_open(self) -> list[GrantCycleConfigModel]:
        """Cycles that are active and currently accepting letters of intent."""
        result = await self._session.execute(
            select(GrantCycleConfigModel)
            .where(
                GrantCycleConfigModel.is_active.is_(True),
                GrantCycleConfigModel.accepting_lois.is_(True),
            )
            .order_by(*_ORDERING)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[GrantCycleConfigModel]:
        result = await self._session.execute(select(GrantCycleConfigModel).order_by(*_ORDERING))
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> GrantCycleConfigModel:
        cycle = GrantCycleConfigModel(**kwargs)
        self._session.add(cycle)
        await self._session.commit()
        await self._session.refresh(cycle)
        return cycle

    async def update(self, cycle_id: str, **fields: Any) -> GrantCycleConfigModel | None:
        """Apply *fields* to one cycle.

        Activating a cycle deactivates every other cycle in the same
        transaction, so at most one cycle is active at a time.
        """
        cycle = await self.get(cycle_id)
        if cycle is None:
            return None
        if fields.get("is_active") is True:
            await self._session.execute(
                update(GrantCycleConfigModel)
                .where(GrantCycleConfigModel.id != cycle_id)
                .values(is_active=False)
            )
        for key, value in fields.items():
            if value is not None and hasattr(cycle, key):
                setattr(cycle, key, value)
        await self._session.commit()
        await self._session.refresh(cycle)
        return cycle
