# app/deps.py

from typing import List

from fastapi import Depends, HTTPException
from sqlmodel import Session

from app.availability import AvailabilityCalculator
from app.conflicts import ConflictGuard
from app.db import get_session
from app.lifecycle import BookingLifecycle, StatusObserver, get_status_observers
from app.schedule import ScheduleManager
from app.settings import SchedulingSettings, get_scheduling_settings
from app.stores import Stores


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def tenant_id_of(user: dict) -> int:
    require_role(user, "tenant")
    if user["tenant_id"] is None:
        raise HTTPException(status_code=403, detail="User is not attached to a tenant")
    return user["tenant_id"]


def professional_id_of(user: dict) -> int:
    require_role(user, "professional")
    if user["professional_id"] is None:
        raise HTTPException(status_code=403, detail="User is not attached to a professional")
    return user["professional_id"]


def get_stores(session: Session = Depends(get_session)) -> Stores:
    return Stores.for_session(session)


def get_availability_calculator(
    stores: Stores = Depends(get_stores),
    settings: SchedulingSettings = Depends(get_scheduling_settings),
) -> AvailabilityCalculator:
    return AvailabilityCalculator(stores, settings)


def get_conflict_guard(
    stores: Stores = Depends(get_stores),
    settings: SchedulingSettings = Depends(get_scheduling_settings),
) -> ConflictGuard:
    return ConflictGuard(stores, settings)


def get_schedule_manager(stores: Stores = Depends(get_stores)) -> ScheduleManager:
    return ScheduleManager(stores)


def get_booking_lifecycle(
    stores: Stores = Depends(get_stores),
    settings: SchedulingSettings = Depends(get_scheduling_settings),
    observers: List[StatusObserver] = Depends(get_status_observers),
) -> BookingLifecycle:
    return BookingLifecycle(stores, settings, observers)
