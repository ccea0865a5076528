# app/routers/availability_routes.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.availability import AvailabilityCalculator
from app.deps import get_availability_calculator
from app.schemas import AvailabilityResponse, AvailableDatesResponse

router = APIRouter(
    prefix="/tenants/{tenant_id}",
    tags=["availability"],
)


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    tenant_id: int,
    service_id: int,
    date: date,
    professional_id: Optional[int] = None,
    calculator: AvailabilityCalculator = Depends(get_availability_calculator),
):
    slots = calculator.compute_availability(tenant_id, service_id, date, professional_id)
    return {"tenant_id": tenant_id, "service_id": service_id, "date": date, "slots": slots}


@router.get("/available-dates", response_model=AvailableDatesResponse)
def available_dates(
    tenant_id: int,
    service_id: int,
    year: int = Query(ge=1, le=9999),
    month: int = Query(ge=1, le=12),
    professional_id: Optional[int] = None,
    calculator: AvailabilityCalculator = Depends(get_availability_calculator),
):
    dates = calculator.compute_available_dates(tenant_id, service_id, year, month, professional_id)
    return {
        "tenant_id": tenant_id,
        "service_id": service_id,
        "year": year,
        "month": month,
        "dates": dates,
    }
