# app/stores.py
#
# Thin query objects over one SQLModel session. Nothing here commits; the
# operation that owns the session decides when (Stores.commit).

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core import day_bounds
from app.errors import AuthorizationError, ConflictError, NotFound
from app.models import (
    Block,
    Booking,
    Professional,
    ProfessionalService,
    ScheduleException,
    Service,
    WorkingHours,
)
from app.schemas import BookingStatus


class CatalogLookup:
    """Read access to professionals, services and who may perform what."""

    def __init__(self, session: Session):
        self.session = session

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.session.get(Service, service_id)

    def get_professional(self, professional_id: int) -> Optional[Professional]:
        return self.session.get(Professional, professional_id)

    def professional_of_tenant(self, tenant_id: int, professional_id: int) -> Professional:
        professional = self.get_professional(professional_id)
        if professional is None:
            raise NotFound("Professional not found")
        if professional.tenant_id != tenant_id:
            raise AuthorizationError("Professional does not belong to this tenant")
        return professional

    def lock_professional(self, professional_id: int) -> Optional[Professional]:
        # row lock serializes writers per professional (ignored by SQLite)
        return self.session.exec(
            select(Professional)
            .where(Professional.id == professional_id)
            .with_for_update()
        ).first()

    def professionals_qualified_for(self, service_id: int) -> List[int]:
        rows = self.session.exec(
            select(ProfessionalService)
            .where(ProfessionalService.service_id == service_id)
            .where(ProfessionalService.active == True)  # noqa: E712
            .order_by(ProfessionalService.id)
        ).all()
        return [r.professional_id for r in rows]

    def is_qualified(self, professional_id: int, service_id: int) -> bool:
        row = self.session.exec(
            select(ProfessionalService)
            .where(ProfessionalService.professional_id == professional_id)
            .where(ProfessionalService.service_id == service_id)
            .where(ProfessionalService.active == True)  # noqa: E712
        ).first()
        return row is not None


class WorkingHoursRegistry:
    def __init__(self, session: Session):
        self.session = session

    def find(self, tenant_id: int, professional_id: Optional[int], weekday: int) -> Optional[WorkingHours]:
        stmt = (
            select(WorkingHours)
            .where(WorkingHours.tenant_id == tenant_id)
            .where(WorkingHours.weekday == weekday)
        )
        if professional_id is None:
            stmt = stmt.where(WorkingHours.professional_id == None)  # noqa: E711
        else:
            stmt = stmt.where(WorkingHours.professional_id == professional_id)
        return self.session.exec(stmt).first()

    def find_active(self, professional_id: int, weekday: int) -> Optional[WorkingHours]:
        return self.session.exec(
            select(WorkingHours)
            .where(WorkingHours.professional_id == professional_id)
            .where(WorkingHours.weekday == weekday)
            .where(WorkingHours.active == True)  # noqa: E712
        ).first()

    def find_tenant_default(self, tenant_id: int, weekday: int) -> Optional[WorkingHours]:
        hours = self.find(tenant_id, None, weekday)
        if hours is None or not hours.active:
            return None
        return hours

    def list_for(self, tenant_id: int, professional_id: Optional[int] = None) -> List[WorkingHours]:
        stmt = select(WorkingHours).where(WorkingHours.tenant_id == tenant_id)
        if professional_id is None:
            stmt = stmt.where(WorkingHours.professional_id == None)  # noqa: E711
        else:
            stmt = stmt.where(WorkingHours.professional_id == professional_id)
        return list(self.session.exec(stmt.order_by(WorkingHours.weekday)).all())

    def add(self, hours: WorkingHours) -> WorkingHours:
        self.session.add(hours)
        return hours


class ScheduleExceptionStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, exception_id: int) -> Optional[ScheduleException]:
        return self.session.get(ScheduleException, exception_id)

    def find_active(self, professional_id: int, on_date: date) -> Optional[ScheduleException]:
        return self.session.exec(
            select(ScheduleException)
            .where(ScheduleException.professional_id == professional_id)
            .where(ScheduleException.date == on_date)
            .where(ScheduleException.active == True)  # noqa: E712
        ).first()

    def exists_active(self, professional_id: int, on_date: date) -> bool:
        return self.find_active(professional_id, on_date) is not None

    def list_active(
        self,
        professional_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[ScheduleException]:
        stmt = (
            select(ScheduleException)
            .where(ScheduleException.professional_id == professional_id)
            .where(ScheduleException.active == True)  # noqa: E712
        )
        if start is not None:
            stmt = stmt.where(ScheduleException.date >= start)
        if end is not None:
            stmt = stmt.where(ScheduleException.date <= end)
        return list(self.session.exec(stmt.order_by(ScheduleException.date)).all())

    def add(self, exception: ScheduleException) -> ScheduleException:
        self.session.add(exception)
        return exception


class BlockStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, block_id: int) -> Optional[Block]:
        return self.session.get(Block, block_id)

    def list_for_date(self, professional_id: int, on_date: date) -> List[Block]:
        return list(self.session.exec(
            select(Block)
            .where(Block.professional_id == professional_id)
            .where(Block.date == on_date)
            .order_by(Block.start_time)
        ).all())

    def list_for_period(self, professional_id: int, start: date, end: date) -> List[Block]:
        return list(self.session.exec(
            select(Block)
            .where(Block.professional_id == professional_id)
            .where(Block.date >= start)
            .where(Block.date <= end)
            .order_by(Block.date, Block.start_time)
        ).all())

    def exists_overlap(self, professional_id: int, on_date: date, start: time, end: time) -> bool:
        hit = self.session.exec(
            select(Block)
            .where(Block.professional_id == professional_id)
            .where(Block.date == on_date)
            .where(Block.start_time < end)
            .where(Block.end_time > start)
        ).first()
        return hit is not None

    def add(self, block: Block) -> Block:
        self.session.add(block)
        return block

    def delete(self, block: Block):
        self.session.delete(block)


class BookingStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.session.get(Booking, booking_id)

    def list_for_professional_on(self, professional_id: int, on_date: date) -> List[Booking]:
        day_start, day_end = day_bounds(on_date)
        return list(self.session.exec(
            select(Booking)
            .where(Booking.professional_id == professional_id)
            .where(Booking.date_time >= day_start)
            .where(Booking.date_time < day_end)
            .order_by(Booking.date_time)
        ).all())

    def exists_at(self, professional_id: int, date_time: datetime, exclude_id: Optional[int] = None) -> bool:
        # exact start-time match only; see the availability module for the
        # length assumed when filtering slots
        stmt = (
            select(Booking)
            .where(Booking.professional_id == professional_id)
            .where(Booking.date_time == date_time)
            .where(Booking.status != BookingStatus.CANCELADO)
        )
        if exclude_id is not None:
            stmt = stmt.where(Booking.id != exclude_id)
        return self.session.exec(stmt).first() is not None

    def list_for_client(self, client_id: int) -> List[Booking]:
        return list(self.session.exec(
            select(Booking)
            .where(Booking.client_id == client_id)
            .order_by(Booking.date_time.desc())
        ).all())

    def list_for_professional(self, professional_id: int, on_date: Optional[date] = None) -> List[Booking]:
        if on_date is not None:
            return self.list_for_professional_on(professional_id, on_date)
        return list(self.session.exec(
            select(Booking)
            .where(Booking.professional_id == professional_id)
            .order_by(Booking.date_time.desc())
        ).all())

    def list_for_tenant(self, tenant_id: int, on_date: Optional[date] = None) -> List[Booking]:
        stmt = select(Booking).where(Booking.tenant_id == tenant_id)
        if on_date is not None:
            day_start, day_end = day_bounds(on_date)
            stmt = stmt.where(Booking.date_time >= day_start).where(Booking.date_time < day_end)
            stmt = stmt.order_by(Booking.date_time)
        else:
            stmt = stmt.order_by(Booking.date_time.desc())
        return list(self.session.exec(stmt).all())

    def add(self, booking: Booking) -> Booking:
        self.session.add(booking)
        return booking


@dataclass
class Stores:
    session: Session
    catalog: CatalogLookup
    hours: WorkingHoursRegistry
    exceptions: ScheduleExceptionStore
    blocks: BlockStore
    bookings: BookingStore

    @classmethod
    def for_session(cls, session: Session) -> "Stores":
        return cls(
            session=session,
            catalog=CatalogLookup(session),
            hours=WorkingHoursRegistry(session),
            exceptions=ScheduleExceptionStore(session),
            blocks=BlockStore(session),
            bookings=BookingStore(session),
        )

    def commit(self, conflict_detail: str = "Conflicting record already exists"):
        """Commit the pending unit of work; a uniqueness violation becomes ConflictError."""
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError(conflict_detail)

    def rollback(self):
        self.session.rollback()

    def refresh(self, *instances):
        for instance in instances:
            self.session.refresh(instance)
