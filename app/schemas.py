# app/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from datetime import datetime, date, time
from typing import List, Optional


class UserRole(str, Enum):
    tenant = "tenant"
    professional = "professional"
    client = "client"


class Creator(str, Enum):
    TENANT = "TENANT"
    PROFESSIONAL = "PROFESSIONAL"


class ExceptionKind(str, Enum):
    CLOSED = "CLOSED"
    SPECIAL_HOURS = "SPECIAL_HOURS"


class BookingStatus(str, Enum):
    PENDENTE = "PENDENTE"
    CONFIRMADO = "CONFIRMADO"
    CANCELADO = "CANCELADO"
    CONCLUIDO = "CONCLUIDO"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole
    shop_name: Optional[str] = None  # required for tenant


class ProfessionalAccountCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole
    tenant_id: Optional[int] = None
    professional_id: Optional[int] = None


class ProfessionalCreate(BaseModel):
    name: str = Field(min_length=1)


class ProfessionalPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    active: bool


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    duration_minutes: int = Field(gt=0)


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    duration_minutes: int
    active: bool


class WorkingHoursIn(BaseModel):
    weekday: int = Field(ge=1, le=7)  # 1=Mon ... 7=Sun
    open_time: time
    close_time: time


class WorkingHoursPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    professional_id: Optional[int]
    weekday: int
    open_time: time
    close_time: time
    active: bool


class ExceptionCreate(BaseModel):
    date: date
    kind: ExceptionKind
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    reason: str = ""


class ExceptionBatchCreate(BaseModel):
    exceptions: List[ExceptionCreate]


class ExceptionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    professional_id: int
    date: date
    kind: ExceptionKind
    open_time: Optional[time]
    close_time: Optional[time]
    reason: str
    created_by: Creator
    active: bool


class BlockCreate(BaseModel):
    date: date
    start_time: time
    end_time: time
    reason: str = ""


class BlockBatchCreate(BaseModel):
    blocks: List[BlockCreate]


class FullDayBlockCreate(BaseModel):
    date: date
    reason: str = ""


class BlockPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    professional_id: int
    date: date
    start_time: time
    end_time: time
    reason: str
    created_by: Creator
    created_at: datetime


class SlotPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    professional_id: int
    professional_name: str
    date: date
    start: time
    end: time


class AvailabilityResponse(BaseModel):
    tenant_id: int
    service_id: int
    date: date
    slots: List[SlotPublic]


class AvailableDatesResponse(BaseModel):
    tenant_id: int
    service_id: int
    year: int
    month: int
    dates: List[date]


class BookingCreate(BaseModel):
    service_id: int
    professional_id: int
    date_time: datetime
    observations: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingReschedule(BaseModel):
    date_time: datetime


class BookingPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    professional_id: int
    service_id: int
    tenant_id: int
    date_time: datetime
    status: BookingStatus
    observations: str
    created_at: datetime
    updated_at: datetime
