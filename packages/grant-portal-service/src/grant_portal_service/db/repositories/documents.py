"""Repository for uploaded documents."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal_service.db.models import ApplicationModel, DocumentModel


class DocumentsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, document_id: str) -> DocumentModel | None:
        return await self._session.get(DocumentModel, document_id)

    async def list_for_organization(self, organization_id: str) -> list[DocumentModel]:
        """Organization-scope documents, grouped by type with the newest first."""
        result = await self._session.execute(
            select(DocumentModel)
            .where(
                DocumentModel.organization_id == organization_id,
                DocumentModel.scope == "ORGANIZATION",
            )
            .order_by(
                DocumentModel.type.asc(),
                DocumentModel.document_year.desc().nulls_last(),
                DocumentModel.uploaded_at.desc(),
            )
        )
        return list(result.scalars().all())

    async def list_for_application(self, application_id: str) -> list[DocumentModel]:
        result = await self._session.execute(
            select(DocumentModel)
            .where(DocumentModel.application_id == application_id)
            .order_by(DocumentModel.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def get_application(self, application_id: str) -> ApplicationModel | None:
        return await self._session.get(ApplicationModel, application_id)

    async def delete(self, document_id: str) -> bool:
        document = await self.get(document_id)
        if document is None:
            return False
        await self._session.delete(document)
        await self._session.commit()
        return True
