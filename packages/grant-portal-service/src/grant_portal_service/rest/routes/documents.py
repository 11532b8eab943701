"""Document listing, lookup and removal."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Query

from grant_portal_service.auth.deps import CallerDep
from grant_portal_service.auth.guards import (
    can_access_organization,
    can_modify_organization_documents,
)
from grant_portal_service.db.deps import DocumentsRepoDep
from grant_portal_service.errors import Forbidden, InvalidInput, NotFound
from grant_portal_service.rest.schemas import DocumentSchema, SuccessResponse

log = structlog.get_logger(__name__)

router = APIRouter()

# Documents attached to an application are frozen once it leaves this status
EDITABLE_APPLICATION_STATUS = "DRAFT"


@router.get("/documents", response_model=list[DocumentSchema])
async def list_documents(
    caller: CallerDep,
    repo: DocumentsRepoDep,
    organization_id: Annotated[str | None, Query(alias="organizationId")] = None,
    application_id: Annotated[str | None, Query(alias="applicationId")] = None,
) -> list[DocumentSchema]:
    """Documents of one organization or one application."""
    if organization_id:
        if not can_access_organization(caller, organization_id):
            raise Forbidden()
        documents = await repo.list_for_organization(organization_id)
    elif application_id:
        application = await repo.get_application(application_id)
        if application is None:
            raise NotFound("Application not found")
        if not can_access_organization(caller, application.organization_id):
            raise Forbidden()
        documents = await repo.list_for_application(application_id)
    else:
        raise InvalidInput("Missing organizationId or applicationId")
    return [DocumentSchema.model_validate(d) for d in documents]


@router.get("/documents/{document_id}", response_model=DocumentSchema)
async def get_document(document_id: str, caller: CallerDep, repo: DocumentsRepoDep) -> DocumentSchema:
    document = await repo.get(document_id)
    if document is None:
        raise NotFound("Document not found")
    if not can_access_organization(caller, document.organization_id):
        raise Forbidden()
    return DocumentSchema.model_validate(document)


@router.delete("/documents/{document_id}", response_model=SuccessResponse)
async def delete_document(document_id: str, caller: CallerDep, repo: DocumentsRepoDep) -> SuccessResponse:
    document = await repo.get(document_id)
    if document is None:
        raise NotFound("Document not found")
    if not can_modify_organization_documents(caller, document.organization_id):
        raise Forbidden()
    if document.application_id:
        application = await repo.get_application(document.application_id)
        if application is not None and application.status != EDITABLE_APPLICATION_STATUS:
            raise InvalidInput("Cannot delete documents from submitted applications")
    await repo.delete(document_id)
    log.info("document_deleted", document_id=document_id, user_id=caller.external_id)
    return SuccessResponse(message="Document deleted")
