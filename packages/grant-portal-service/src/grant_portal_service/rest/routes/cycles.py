"""Grant cycle endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from grant_portal_service.auth.deps import AdminDep, CallerDep
from grant_portal_service.db.deps import CyclesRepoDep
from grant_portal_service.errors import InvalidInput, NotFound
from grant_portal_service.rest.schemas import (
    CycleCreateRequest,
    CycleSchema,
    CycleSummarySchema,
    CycleUpdateRequest,
)

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/cycles", response_model=list[CycleSummarySchema])
async def list_open_cycles(repo: CyclesRepoDep, caller: CallerDep) -> list[CycleSummarySchema]:
    """Cycles an applicant can currently submit a letter of intent to."""
    cycles = await repo.list_open()
    return [
        CycleSummarySchema.model_validate(c)
        for c in cycles
        if c.is_active and c.accepting_lois
    ]


@router.get("/admin/cycles", response_model=list[CycleSchema])
async def list_all_cycles(repo: CyclesRepoDep, caller: AdminDep) -> list[CycleSchema]:
    return [CycleSchema.model_validate(c) for c in await repo.list_all()]


@router.post("/admin/cycles", response_model=CycleSchema, status_code=201)
async def create_cycle(
    request: CycleCreateRequest, repo: CyclesRepoDep, caller: AdminDep
) -> CycleSchema:
    if await repo.get_by_cycle_year(request.cycle, request.year):
        raise InvalidInput(f"A {request.cycle} {request.year} cycle already exists")
    if request.is_active:
        # Route through update so activation stays exclusive
        cycle = await repo.create(**request.model_dump(exclude={"is_active"}))
        cycle = await repo.update(cycle.id, is_active=True)
    else:
        cycle = await repo.create(**request.model_dump())
    log.info("cycle_created", cycle_id=cycle.id, cycle=request.cycle, year=request.year)
    return CycleSchema.model_validate(cycle)


@router.patch("/admin/cycles/{cycle_id}", response_model=CycleSchema)
async def update_cycle(
    cycle_id: str, request: CycleUpdateRequest, repo: CyclesRepoDep, caller: AdminDep
) -> CycleSchema:
    cycle = await repo.update(cycle_id, **request.model_dump(exclude_none=True))
    if cycle is None:
        raise NotFound("Grant cycle not found")
    log.info("cycle_updated", cycle_id=cycle_id, changes=request.model_dump(exclude_none=True))
    return CycleSchema.model_validate(cycle)
