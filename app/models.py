# app/models.py

from typing import Optional
from datetime import datetime, date as Date, time

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import SQLModel, Field

from app.schemas import BookingStatus, Creator, ExceptionKind


class Tenant(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str


class Professional(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    name: str
    active: bool = True


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    name: str
    duration_minutes: int
    active: bool = True


class ProfessionalService(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("professional_id", "service_id", name="uq_professional_service"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    professional_id: int = Field(foreign_key="professional.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    active: bool = True


class WorkingHours(SQLModel, table=True):
    # professional_id NULL is the tenant's default week
    __table_args__ = (
        UniqueConstraint("tenant_id", "professional_id", "weekday", name="uq_hours_weekday"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    professional_id: Optional[int] = Field(default=None, foreign_key="professional.id", index=True)
    weekday: int  # 1=Mon ... 7=Sun
    open_time: time
    close_time: time
    active: bool = True


class ScheduleException(SQLModel, table=True):
    __table_args__ = (
        Index(
            "uq_exception_active_date",
            "professional_id",
            "date",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    professional_id: int = Field(foreign_key="professional.id", index=True)
    date: Date = Field(index=True)
    kind: ExceptionKind
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    reason: str = ""
    created_by: Creator
    active: bool = True


class Block(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    professional_id: int = Field(foreign_key="professional.id", index=True)
    date: Date = Field(index=True)
    start_time: time
    end_time: time
    reason: str = ""
    created_by: Creator
    created_at: datetime


class Booking(SQLModel, table=True):
    # one open booking per professional and start time. Only PENDENTE and
    # CONFIRMADO are indexed: a cancelled booking may still be closed as
    # CONCLUIDO after its start was booked again.
    __table_args__ = (
        Index(
            "uq_booking_open_start",
            "professional_id",
            "date_time",
            unique=True,
            sqlite_where=text("status IN ('PENDENTE', 'CONFIRMADO')"),
            postgresql_where=text("status IN ('PENDENTE', 'CONFIRMADO')"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    client_id: int = Field(foreign_key="user.id", index=True)
    professional_id: int = Field(foreign_key="professional.id", index=True)
    service_id: int = Field(foreign_key="service.id")
    tenant_id: int = Field(foreign_key="tenant.id", index=True)
    date_time: datetime = Field(index=True)
    status: BookingStatus = BookingStatus.PENDENTE
    observations: str = ""
    created_at: datetime
    updated_at: datetime


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # tenant, professional or client
    tenant_id: Optional[int] = Field(default=None, foreign_key="tenant.id")
    professional_id: Optional[int] = Field(default=None, foreign_key="professional.id")
