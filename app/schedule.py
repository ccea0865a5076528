# app/schedule.py

from datetime import date, time
from typing import List, Optional

from app.errors import AuthorizationError, ConflictError, NotFound, ValidationError
from app.logging_config import get_logger
from app.models import ScheduleException, WorkingHours
from app.schemas import Creator, ExceptionKind
from app.stores import Stores

logger = get_logger(__name__)


class ScheduleManager:
    """Weekly hours, date exceptions, and removal of blocks/exceptions."""

    def __init__(self, stores: Stores):
        self.stores = stores

    # ---- working hours ----

    def upsert_working_hours(
        self,
        tenant_id: int,
        professional_id: Optional[int],
        weekday: int,
        open_time: time,
        close_time: time,
    ) -> WorkingHours:
        if not 1 <= weekday <= 7:
            raise ValidationError("weekday must be between 1 (Monday) and 7 (Sunday)")
        if not open_time < close_time:
            raise ValidationError("open_time must be before close_time")
        if professional_id is not None:
            self.stores.catalog.professional_of_tenant(tenant_id, professional_id)

        hours = self.stores.hours.find(tenant_id, professional_id, weekday)
        if hours is None:
            hours = WorkingHours(
                tenant_id=tenant_id,
                professional_id=professional_id,
                weekday=weekday,
                open_time=open_time,
                close_time=close_time,
            )
        else:
            hours.open_time = open_time
            hours.close_time = close_time
            hours.active = True

        self.stores.hours.add(hours)
        self.stores.commit("Working hours already set for this weekday")
        self.stores.refresh(hours)
        logger.info("working_hours_saved", tenant_id=tenant_id, professional_id=professional_id,
                    weekday=weekday)
        return hours

    def deactivate_working_hours(self, tenant_id: int, professional_id: Optional[int], weekday: int) -> WorkingHours:
        hours = self.stores.hours.find(tenant_id, professional_id, weekday)
        if hours is None:
            raise NotFound("Working hours not found for this weekday")

        hours.active = False
        self.stores.hours.add(hours)
        self.stores.commit()
        self.stores.refresh(hours)
        logger.info("working_hours_deactivated", tenant_id=tenant_id, professional_id=professional_id,
                    weekday=weekday)
        return hours

    # ---- exceptions ----

    def create_exception(
        self,
        professional_id: int,
        on_date: date,
        kind: ExceptionKind,
        open_time: Optional[time],
        close_time: Optional[time],
        reason: str,
        creator: Creator,
    ) -> ScheduleException:
        exception = self._add_exception(professional_id, on_date, kind, open_time, close_time, reason, creator)
        self.stores.commit("An exception already exists for this date")
        self.stores.refresh(exception)
        logger.info("exception_created", exception_id=exception.id, professional_id=professional_id,
                    date=on_date.isoformat(), kind=kind.value)
        return exception

    def create_exceptions_batch(self, professional_id: int, requests, creator: Creator) -> List[ScheduleException]:
        """All-or-nothing, like block batches. Items carry date/kind/open_time/close_time/reason."""
        created = []
        try:
            for r in requests:
                created.append(self._add_exception(
                    professional_id, r.date, r.kind, r.open_time, r.close_time, r.reason, creator
                ))
        except Exception:
            self.stores.rollback()
            raise

        self.stores.commit("An exception already exists for this date")
        self.stores.refresh(*created)
        return created

    def _add_exception(self, professional_id, on_date, kind, open_time, close_time, reason, creator):
        if self.stores.catalog.lock_professional(professional_id) is None:
            raise NotFound("Professional not found")

        if kind == ExceptionKind.SPECIAL_HOURS:
            if open_time is None or close_time is None:
                raise ValidationError("Special hours require both open_time and close_time")
            if not open_time < close_time:
                raise ValidationError("open_time must be before close_time")
        else:
            # a closed day has no window
            open_time = close_time = None

        if self.stores.exceptions.exists_active(professional_id, on_date):
            raise ConflictError("An exception already exists for this date")

        return self.stores.exceptions.add(ScheduleException(
            professional_id=professional_id,
            date=on_date,
            kind=kind,
            open_time=open_time,
            close_time=close_time,
            reason=reason or "",
            created_by=creator,
        ))

    # ---- removal ----

    def remove_block(self, block_id: int, requester_id: int, requester_role: Creator):
        """requester_id is a professional id for PROFESSIONAL and a tenant id for TENANT."""
        block = self.stores.blocks.get(block_id)
        if block is None:
            raise NotFound("Block not found")

        self._authorize_removal(block.professional_id, block.created_by, requester_id, requester_role, "block")

        self.stores.blocks.delete(block)
        self.stores.commit()
        logger.info("block_removed", block_id=block_id, removed_by=requester_role.value)

    def remove_exception(self, exception_id: int, requester_id: int, requester_role: Creator):
        exception = self.stores.exceptions.get(exception_id)
        if exception is None or not exception.active:
            raise NotFound("Exception not found")

        self._authorize_removal(
            exception.professional_id, exception.created_by, requester_id, requester_role, "exception"
        )

        exception.active = False
        self.stores.exceptions.add(exception)
        self.stores.commit()
        logger.info("exception_removed", exception_id=exception_id, removed_by=requester_role.value)

    def _authorize_removal(self, professional_id, created_by, requester_id, requester_role, what):
        if requester_role == Creator.PROFESSIONAL:
            if professional_id != requester_id:
                raise AuthorizationError(f"This {what} does not belong to this professional")
            if created_by != Creator.PROFESSIONAL:
                raise AuthorizationError(f"A professional may only remove a {what} they created")
            return

        self.stores.catalog.professional_of_tenant(requester_id, professional_id)
