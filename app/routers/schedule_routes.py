# app/routers/schedule_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.auth import get_current_user
from app.deps import get_schedule_manager, get_stores, professional_id_of, tenant_id_of
from app.schedule import ScheduleManager
from app.schemas import (
    Creator,
    ExceptionBatchCreate,
    ExceptionCreate,
    ExceptionPublic,
    WorkingHoursIn,
    WorkingHoursPublic,
)
from app.stores import Stores

router = APIRouter(
    tags=["schedule"],
)


# ---- tenant: default week ----

@router.put("/tenants/me/working-hours", response_model=WorkingHoursPublic)
def set_tenant_hours(
    body: WorkingHoursIn,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    return manager.upsert_working_hours(tenant_id, None, body.weekday, body.open_time, body.close_time)


@router.get("/tenants/me/working-hours", response_model=List[WorkingHoursPublic])
def list_tenant_hours(
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    return stores.hours.list_for(tenant_id_of(current_user))


@router.delete("/tenants/me/working-hours/{weekday}", response_model=WorkingHoursPublic)
def deactivate_tenant_hours(
    weekday: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    return manager.deactivate_working_hours(tenant_id_of(current_user), None, weekday)


# ---- tenant: a professional's week and exceptions ----

@router.put("/tenants/me/professionals/{professional_id}/working-hours", response_model=WorkingHoursPublic)
def set_professional_hours_as_tenant(
    professional_id: int,
    body: WorkingHoursIn,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    return manager.upsert_working_hours(tenant_id, professional_id, body.weekday, body.open_time, body.close_time)


@router.get("/tenants/me/professionals/{professional_id}/working-hours", response_model=List[WorkingHoursPublic])
def list_professional_hours_as_tenant(
    professional_id: int,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    stores.catalog.professional_of_tenant(tenant_id, professional_id)
    return stores.hours.list_for(tenant_id, professional_id)


@router.delete(
    "/tenants/me/professionals/{professional_id}/working-hours/{weekday}",
    response_model=WorkingHoursPublic,
)
def deactivate_professional_hours_as_tenant(
    professional_id: int,
    weekday: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    return manager.deactivate_working_hours(tenant_id_of(current_user), professional_id, weekday)


@router.post(
    "/tenants/me/professionals/{professional_id}/exceptions",
    response_model=ExceptionPublic,
    status_code=201,
)
def create_exception_as_tenant(
    professional_id: int,
    body: ExceptionCreate,
    stores: Stores = Depends(get_stores),
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return manager.create_exception(
        professional_id, body.date, body.kind, body.open_time, body.close_time, body.reason, Creator.TENANT
    )


@router.post(
    "/tenants/me/professionals/{professional_id}/exceptions/batch",
    response_model=List[ExceptionPublic],
    status_code=201,
)
def create_exceptions_batch_as_tenant(
    professional_id: int,
    body: ExceptionBatchCreate,
    stores: Stores = Depends(get_stores),
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return manager.create_exceptions_batch(professional_id, body.exceptions, Creator.TENANT)


@router.get(
    "/tenants/me/professionals/{professional_id}/exceptions",
    response_model=List[ExceptionPublic],
)
def list_exceptions_as_tenant(
    professional_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    stores.catalog.professional_of_tenant(tenant_id_of(current_user), professional_id)
    return stores.exceptions.list_active(professional_id, start, end)


@router.delete("/tenants/me/exceptions/{exception_id}", status_code=204)
def remove_exception_as_tenant(
    exception_id: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    manager.remove_exception(exception_id, tenant_id_of(current_user), Creator.TENANT)


# ---- professional: own week and exceptions ----

@router.put("/professionals/me/working-hours", response_model=WorkingHoursPublic)
def set_own_hours(
    body: WorkingHoursIn,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    professional_id = professional_id_of(current_user)
    return manager.upsert_working_hours(
        current_user["tenant_id"], professional_id, body.weekday, body.open_time, body.close_time
    )


@router.get("/professionals/me/working-hours", response_model=List[WorkingHoursPublic])
def list_own_hours(
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    professional_id = professional_id_of(current_user)
    return stores.hours.list_for(current_user["tenant_id"], professional_id)


@router.delete("/professionals/me/working-hours/{weekday}", response_model=WorkingHoursPublic)
def deactivate_own_hours(
    weekday: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    professional_id = professional_id_of(current_user)
    return manager.deactivate_working_hours(current_user["tenant_id"], professional_id, weekday)


@router.post("/professionals/me/exceptions", response_model=ExceptionPublic, status_code=201)
def create_own_exception(
    body: ExceptionCreate,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    return manager.create_exception(
        professional_id_of(current_user),
        body.date, body.kind, body.open_time, body.close_time, body.reason,
        Creator.PROFESSIONAL,
    )


@router.post("/professionals/me/exceptions/batch", response_model=List[ExceptionPublic], status_code=201)
def create_own_exceptions_batch(
    body: ExceptionBatchCreate,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    return manager.create_exceptions_batch(professional_id_of(current_user), body.exceptions, Creator.PROFESSIONAL)


@router.get("/professionals/me/exceptions", response_model=List[ExceptionPublic])
def list_own_exceptions(
    start: Optional[date] = None,
    end: Optional[date] = None,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    return stores.exceptions.list_active(professional_id_of(current_user), start, end)


@router.delete("/professionals/me/exceptions/{exception_id}", status_code=204)
def remove_own_exception(
    exception_id: int,
    manager: ScheduleManager = Depends(get_schedule_manager),
    current_user: dict = Depends(get_current_user),
):
    manager.remove_exception(exception_id, professional_id_of(current_user), Creator.PROFESSIONAL)
