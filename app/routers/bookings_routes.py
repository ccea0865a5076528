# app/routers/bookings_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.auth import get_current_user
from app.conflicts import ConflictGuard
from app.deps import (
    get_booking_lifecycle,
    get_conflict_guard,
    get_stores,
    professional_id_of,
    require_role,
    tenant_id_of,
)
from app.errors import AuthorizationError, NotFound, ValidationError
from app.lifecycle import BookingLifecycle
from app.models import Booking
from app.schemas import (
    BookingCreate,
    BookingPublic,
    BookingReschedule,
    BookingStatus,
    BookingStatusUpdate,
)
from app.settings import SchedulingSettings, get_scheduling_settings
from app.stores import Stores

router = APIRouter(
    tags=["bookings"],
)


def load_booking_for(stores: Stores, booking_id: int, user: dict) -> Booking:
    """Fetch a booking the requester may see: own client, own tenant, or own professional."""
    booking = stores.bookings.get(booking_id)
    if booking is None:
        raise NotFound(f"Booking {booking_id} not found")

    role = user["role"]
    if role == "client":
        allowed = booking.client_id == user["id"]
    elif role == "tenant":
        allowed = booking.tenant_id == user["tenant_id"]
    elif role == "professional":
        allowed = booking.professional_id == user["professional_id"]
    else:
        allowed = False

    if not allowed:
        raise AuthorizationError("You are not allowed to access this booking")
    return booking


@router.post("/bookings", response_model=BookingPublic, status_code=201)
def create_booking(
    body: BookingCreate,
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    return guard.create_booking(
        current_user["id"], body.service_id, body.professional_id, body.date_time, body.observations
    )


@router.get("/bookings/{booking_id}", response_model=BookingPublic)
def get_booking(
    booking_id: int,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    return load_booking_for(stores, booking_id, current_user)


@router.get("/clients/me/bookings", response_model=List[BookingPublic])
def list_my_bookings(
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    return stores.bookings.list_for_client(current_user["id"])


@router.get("/tenants/me/bookings", response_model=List[BookingPublic])
def list_tenant_bookings(
    on_date: Optional[date] = None,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    return stores.bookings.list_for_tenant(tenant_id_of(current_user), on_date)


@router.patch("/tenants/me/bookings/{booking_id}/status", response_model=BookingPublic)
def update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
    current_user: dict = Depends(get_current_user),
):
    return lifecycle.update_booking_status(booking_id, tenant_id_of(current_user), body.status)


@router.get("/professionals/me/bookings", response_model=List[BookingPublic])
def list_own_bookings(
    on_date: Optional[date] = None,
    stores: Stores = Depends(get_stores),
    current_user: dict = Depends(get_current_user),
):
    return stores.bookings.list_for_professional(professional_id_of(current_user), on_date)


@router.patch("/professionals/me/bookings/{booking_id}/status", response_model=BookingPublic)
def update_own_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    stores: Stores = Depends(get_stores),
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
    current_user: dict = Depends(get_current_user),
):
    professional_id_of(current_user)
    booking = load_booking_for(stores, booking_id, current_user)
    return lifecycle.transition(booking, body.status)


@router.patch("/bookings/{booking_id}/cancel", response_model=BookingPublic)
def cancel_booking(
    booking_id: int,
    stores: Stores = Depends(get_stores),
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
    settings: SchedulingSettings = Depends(get_scheduling_settings),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    booking = load_booking_for(stores, booking_id, current_user)
    if booking.date_time < settings.now():
        raise ValidationError("Cannot cancel a booking in the past")
    return lifecycle.transition(booking, BookingStatus.CANCELADO)


@router.patch("/bookings/{booking_id}/reschedule", response_model=BookingPublic)
def reschedule_booking(
    booking_id: int,
    body: BookingReschedule,
    stores: Stores = Depends(get_stores),
    guard: ConflictGuard = Depends(get_conflict_guard),
    current_user: dict = Depends(get_current_user),
):
    booking = load_booking_for(stores, booking_id, current_user)
    return guard.reschedule_booking(booking, body.date_time)
