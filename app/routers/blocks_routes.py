# app/routers/blocks_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.auth import get_current_user
from app.conflicts import BlockRequest, ConflictGuard
from app.deps import get_conflict_guard, get_schedule_manager, get_stores, professional_id_of, tenant_id_of
from app.schedule import ScheduleManager
from app.schemas import BlockBatchCreate, BlockCreate, BlockPublic, Creator, FullDayBlockCreate
from app.stores import Stores

router = APIRouter(
    tags=["blocks"],
)


def _as_requests(blocks: List[BlockCreate]) -> List[BlockRequest]:
    return [BlockRequest(b.date, b.start_time, b.end_time, b.reason) for b in blocks]


def _check_period(start: date, end: date):
    if end < start:
        raise HTTPException(status_code=422, detail="end cannot be before start")


# ---- professional ----

@router.post("/professionals/me/blocks", response_model=BlockPublic, status_code=201)
def create_own_block(
    body: BlockCreate,
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    return guard.create_block(
        professional_id_of(current_user),
        body.date, body.start_time, body.end_time, body.reason,
        Creator.PROFESSIONAL,
    )


@router.post("/professionals/me/blocks/batch", response_model=List[BlockPublic], status_code=201)
def create_own_blocks_batch(
    body: BlockBatchCreate,
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    return guard.create_blocks_batch(professional_id_of(current_user), _as_requests(body.blocks), Creator.PROFESSIONAL)


@router.get("/professionals/me/blocks", response_model=List[BlockPublic])
def list_own_blocks(
    start: date,
    end: date,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    _check_period(start, end)
    return stores.blocks.list_for_period(professional_id_of(current_user), start, end)


@router.delete("/professionals/me/blocks/{block_id}", status_code=204)
def remove_own_block(
    block_id: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    manager.remove_block(block_id, professional_id_of(current_user), Creator.PROFESSIONAL)


# ---- tenant ----

@router.post("/tenants/me/professionals/{professional_id}/blocks", response_model=BlockPublic, status_code=201)
def create_block_as_tenant(
    professional_id: int,
    body: BlockCreate,
    stores: Stores = Depends(get_stores),
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return guard.create_block(
        professional_id, body.date, body.start_time, body.end_time, body.reason, Creator.TENANT
    )


@router.post(
    "/tenants/me/professionals/{professional_id}/blocks/full-day",
    response_model=BlockPublic,
    status_code=201,
)
def create_full_day_block(
    professional_id: int,
    body: FullDayBlockCreate,
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    return guard.create_full_day_block(tenant_id_of(current_user), professional_id, body.date, body.reason)


@router.post(
    "/tenants/me/professionals/{professional_id}/blocks/batch",
    response_model=List[BlockPublic],
    status_code=201,
)
def create_blocks_batch_as_tenant(
    professional_id: int,
    body: BlockBatchCreate,
    stores: Stores = Depends(get_stores),
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return guard.create_blocks_batch(professional_id, _as_requests(body.blocks), Creator.TENANT)


@router.get("/tenants/me/professionals/{professional_id}/blocks", response_model=List[BlockPublic])
def list_blocks_as_tenant(
    professional_id: int,
    start: date,
    end: date,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    _check_period(start, end)
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return stores.blocks.list_for_period(professional_id, start, end)


@router.delete("/tenants/me/blocks/{block_id}", status_code=204)
def remove_block_as_tenant(
    block_id: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    manager.remove_block(block_id, tenant_id_of(current_user), Creator.TENANT)
