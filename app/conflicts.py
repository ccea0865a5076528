# app/conflicts.py

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional

from app.errors import ConflictError, NotFound, ValidationError
from app.logging_config import get_logger
from app.models import Block, Booking
from app.schemas import BookingStatus, Creator
from app.settings import SchedulingSettings
from app.stores import Stores

logger = get_logger(__name__)


@dataclass(frozen=True)
class BlockRequest:
    date: date
    start_time: time
    end_time: time
    reason: str = ""


class ConflictGuard:
    """Write-time checks for blocks and bookings.

    Each public method is one unit of work: it either commits everything it
    added or raises with the session rolled back.
    """

    def __init__(self, stores: Stores, settings: SchedulingSettings):
        self.stores = stores
        self.settings = settings

    # ---- blocks ----

    def create_block(
        self,
        professional_id: int,
        on_date: date,
        start: time,
        end: time,
        reason: str,
        creator: Creator,
    ) -> Block:
        block = self._add_block(professional_id, BlockRequest(on_date, start, end, reason), creator)
        self.stores.commit("A block already exists in this interval")
        self.stores.refresh(block)
        logger.info("block_created", block_id=block.id, professional_id=professional_id,
                    date=on_date.isoformat(), created_by=creator.value)
        return block

    def create_full_day_block(self, tenant_id: int, professional_id: int, on_date: date, reason: str) -> Block:
        professional = self.stores.catalog.professional_of_tenant(tenant_id, professional_id)

        hours = self.stores.hours.find(tenant_id, professional.id, on_date.isoweekday())
        if hours is None or not hours.active:
            raise ValidationError("Professional does not work this day")

        return self.create_block(
            professional.id, on_date, hours.open_time, hours.close_time, reason, Creator.TENANT
        )

    def create_blocks_batch(
        self,
        professional_id: int,
        requests: List[BlockRequest],
        creator: Creator,
    ) -> List[Block]:
        """All-or-nothing: one failing item leaves no block of the batch behind."""
        created = []
        try:
            for request in requests:
                created.append(self._add_block(professional_id, request, creator))
        except Exception:
            self.stores.rollback()
            raise

        self.stores.commit("A block already exists in this interval")
        self.stores.refresh(*created)
        logger.info("blocks_created", professional_id=professional_id, count=len(created),
                    created_by=creator.value)
        return created

    def _add_block(self, professional_id: int, request: BlockRequest, creator: Creator) -> Block:
        professional = self.stores.catalog.lock_professional(professional_id)
        if professional is None:
            raise NotFound("Professional not found")

        if not request.start_time < request.end_time:
            raise ValidationError("Block start time must be before end time")

        # pending blocks of the same batch are flushed before this query runs
        if self.stores.blocks.exists_overlap(professional_id, request.date, request.start_time, request.end_time):
            logger.info("block_rejected", professional_id=professional_id,
                        date=request.date.isoformat(), reason="overlap")
            raise ConflictError("A block already exists in this interval")

        return self.stores.blocks.add(Block(
            professional_id=professional_id,
            date=request.date,
            start_time=request.start_time,
            end_time=request.end_time,
            reason=request.reason or "",
            created_by=creator,
            created_at=self.settings.now(),
        ))

    # ---- bookings ----

    def create_booking(
        self,
        client_id: int,
        service_id: int,
        professional_id: int,
        date_time: datetime,
        observations: Optional[str] = None,
    ) -> Booking:
        now = self.settings.now()
        if date_time < now:
            raise ValidationError("Booking date/time cannot be in the past")

        service = self.stores.catalog.get_service(service_id)
        if service is None:
            raise NotFound(f"Service {service_id} not found")

        professional = self.stores.catalog.lock_professional(professional_id)
        if professional is None:
            raise NotFound(f"Professional {professional_id} not found")

        if not self.stores.catalog.is_qualified(professional_id, service_id):
            raise ValidationError("Professional does not perform this service")

        if self.stores.bookings.exists_at(professional_id, date_time):
            logger.info("booking_rejected", professional_id=professional_id,
                        date_time=date_time.isoformat(), reason="taken")
            raise ConflictError("Time not available for this professional")

        booking = self.stores.bookings.add(Booking(
            client_id=client_id,
            professional_id=professional_id,
            service_id=service_id,
            tenant_id=professional.tenant_id,
            date_time=date_time,
            status=BookingStatus.PENDENTE,
            observations=observations or "",
            created_at=now,
            updated_at=now,
        ))
        # a concurrent writer that slipped past exists_at trips the unique index here
        self.stores.commit("Time not available for this professional")
        self.stores.refresh(booking)
        logger.info("booking_created", booking_id=booking.id, professional_id=professional_id,
                    date_time=date_time.isoformat())
        return booking

    def reschedule_booking(self, booking: Booking, new_date_time: datetime) -> Booking:
        """Move an already authorized booking to a new start time, keeping its status."""
        if booking.status == BookingStatus.CANCELADO:
            raise ValidationError("Cannot reschedule a cancelled booking")

        now = self.settings.now()
        if new_date_time < now:
            raise ValidationError("New date/time cannot be in the past")

        self.stores.catalog.lock_professional(booking.professional_id)
        if self.stores.bookings.exists_at(booking.professional_id, new_date_time, exclude_id=booking.id):
            raise ConflictError("Time not available for this professional")

        old_date_time = booking.date_time
        booking.date_time = new_date_time
        booking.updated_at = now
        self.stores.bookings.add(booking)
        self.stores.commit("Time not available for this professional")
        self.stores.refresh(booking)
        logger.info("booking_rescheduled", booking_id=booking.id,
                    old_date_time=old_date_time.isoformat(), new_date_time=new_date_time.isoformat())
        return booking
