# app/availability.py

"""
Open-slot computation.

For each professional qualified for a service the effective window of the day
is resolved (schedule exception first, then the professional's weekly hours,
then the tenant's default week). Candidate slots start at the window's open
time and advance by the configured step, each as long as the service. A
candidate survives if it ends by close and overlaps neither a block nor a live
booking of that professional.

Existing bookings are treated as occupying `default_booking_minutes` from
their start, whatever the booked service's real length; booking creation only
rejects exact start-time clashes. Both behaviours are kept as they are.
"""

import calendar
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import List, Optional, Tuple

from app.core import at, iter_slots, overlaps
from app.logging_config import get_logger
from app.models import Professional
from app.schemas import BookingStatus, ExceptionKind
from app.settings import SchedulingSettings
from app.stores import Stores

logger = get_logger(__name__)


@dataclass(frozen=True)
class Slot:
    professional_id: int
    professional_name: str
    date: date
    start: time
    end: time


class AvailabilityCalculator:
    def __init__(self, stores: Stores, settings: SchedulingSettings):
        self.stores = stores
        self.settings = settings

    def effective_window(self, professional: Professional, on_date: date) -> Optional[Tuple[time, time]]:
        """(open, close) for the professional on that date, or None when not working."""
        exception = self.stores.exceptions.find_active(professional.id, on_date)
        if exception is not None:
            if exception.kind == ExceptionKind.CLOSED:
                return None
            return exception.open_time, exception.close_time

        weekday = on_date.isoweekday()
        hours = self.stores.hours.find_active(professional.id, weekday)
        if hours is None:
            hours = self.stores.hours.find_tenant_default(professional.tenant_id, weekday)
        if hours is None:
            return None
        return hours.open_time, hours.close_time

    def compute_availability(
        self,
        tenant_id: int,
        service_id: int,
        on_date: date,
        professional_id: Optional[int] = None,
    ) -> List[Slot]:
        # past dates and unknown services are "nothing available", not errors
        if on_date < self.settings.today():
            return []

        service = self.stores.catalog.get_service(service_id)
        if service is None or not service.active or service.tenant_id != tenant_id:
            return []

        duration = service.duration_minutes
        if not duration or duration <= 0:
            duration = self.settings.default_booking_minutes

        result: List[Slot] = []
        for candidate_id in self.stores.catalog.professionals_qualified_for(service_id):
            if professional_id is not None and candidate_id != professional_id:
                continue

            professional = self.stores.catalog.get_professional(candidate_id)
            if professional is None or not professional.active or professional.tenant_id != tenant_id:
                continue

            window = self.effective_window(professional, on_date)
            if window is None:
                continue

            result.extend(self._free_slots(professional, on_date, window, duration))

        logger.debug(
            "availability_computed",
            tenant_id=tenant_id,
            service_id=service_id,
            date=on_date.isoformat(),
            slots=len(result),
        )
        return result

    def compute_available_dates(
        self,
        tenant_id: int,
        service_id: int,
        year: int,
        month: int,
        professional_id: Optional[int] = None,
    ) -> List[date]:
        today = self.settings.today()
        days_in_month = calendar.monthrange(year, month)[1]

        dates = []
        for day in range(1, days_in_month + 1):
            candidate = date(year, month, day)
            if candidate < today:
                continue
            if self.compute_availability(tenant_id, service_id, candidate, professional_id):
                dates.append(candidate)
        return dates

    def _free_slots(self, professional, on_date, window, duration_minutes) -> List[Slot]:
        open_time, close_time = window

        blocks = self.stores.blocks.list_for_date(professional.id, on_date)
        blocked = [(at(on_date, b.start_time), at(on_date, b.end_time)) for b in blocks]

        booked_length = timedelta(minutes=self.settings.default_booking_minutes)
        booked = [
            (b.date_time, b.date_time + booked_length)
            for b in self.stores.bookings.list_for_professional_on(professional.id, on_date)
            if b.status != BookingStatus.CANCELADO
        ]

        slots = []
        for slot_start, slot_end in iter_slots(
            at(on_date, open_time),
            at(on_date, close_time),
            timedelta(minutes=duration_minutes),
            timedelta(minutes=self.settings.slot_step_minutes),
        ):
            if any(overlaps(slot_start, slot_end, s, e) for s, e in blocked):
                continue
            if any(overlaps(slot_start, slot_end, s, e) for s, e in booked):
                continue

            slots.append(Slot(
                professional_id=professional.id,
                professional_name=professional.name,
                date=on_date,
                start=slot_start.time(),
                end=slot_end.time(),
            ))
        return slots
