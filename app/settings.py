# app/settings.py

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barbershop.db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-later")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class SchedulingSettings:
    """Knobs of the availability engine.

    slot_step_minutes: distance between consecutive candidate slot starts.
    default_booking_minutes: length assumed for an existing booking when
        filtering slots, and the fallback duration for a service without one.
    clock: returns the current naive local datetime.
    """

    slot_step_minutes: int = 30
    default_booking_minutes: int = 60
    clock: Callable[[], datetime] = field(default=datetime.now)

    def __post_init__(self):
        if self.slot_step_minutes <= 0:
            raise ValueError("slot_step_minutes must be positive")
        if self.default_booking_minutes <= 0:
            raise ValueError("default_booking_minutes must be positive")

    def now(self) -> datetime:
        return self.clock()

    def today(self):
        return self.clock().date()


scheduling_settings = SchedulingSettings(
    slot_step_minutes=int(os.getenv("SLOT_STEP_MINUTES", "30")),
    default_booking_minutes=int(os.getenv("DEFAULT_BOOKING_MINUTES", "60")),
)


def get_scheduling_settings() -> SchedulingSettings:
    return scheduling_settings
