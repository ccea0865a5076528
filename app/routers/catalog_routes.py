# app/routers/catalog_routes.py
#
# Minimal tenant-side registration of professionals, their logins, services
# and qualifications, so the scheduling endpoints have something to work on.

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.auth import get_current_user, hash_password, user_to_dict
from app.db import get_session
from app.deps import tenant_id_of
from app.models import Professional, ProfessionalService, Service, User
from app.schemas import (
    ProfessionalAccountCreate,
    ProfessionalCreate,
    ProfessionalPublic,
    ServiceCreate,
    ServicePublic,
    UserPublic,
    UserRole,
)

router = APIRouter(
    prefix="/tenants/me",
    tags=["catalog"],
)


@router.post("/professionals", response_model=ProfessionalPublic, status_code=201)
def create_professional(
    body: ProfessionalCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    professional = Professional(tenant_id=tenant_id, name=body.name)
    session.add(professional)
    session.commit()
    session.refresh(professional)
    return professional


@router.get("/professionals", response_model=List[ProfessionalPublic])
def list_professionals(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    return session.exec(
        select(Professional).where(Professional.tenant_id == tenant_id).order_by(Professional.id)
    ).all()


@router.post("/services", response_model=ServicePublic, status_code=201)
def create_service(
    body: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)
    service = Service(tenant_id=tenant_id, name=body.name, duration_minutes=body.duration_minutes)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@router.put("/professionals/{professional_id}/services/{service_id}", status_code=204)
def qualify_professional(
    professional_id: int,
    service_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    tenant_id = tenant_id_of(current_user)

    professional = session.get(Professional, professional_id)
    service = session.get(Service, service_id)
    if professional is None or professional.tenant_id != tenant_id:
        raise HTTPException(status_code=404, detail="Professional not found")
    if service is None or service.tenant_id != tenant_id:
        raise HTTPException(status_code=404, detail="Service not found")

    link = session.exec(
        select(ProfessionalService)
        .where(ProfessionalService.professional_id == professional_id)
        .where(ProfessionalService.service_id == service_id)
    ).first()
    if link is None:
        link = ProfessionalService(professional_id=professional_id, service_id=service_id)
    link.active = True
    session.add(link)
    session.commit()


@router.post("/professionals/{professional_id}/account", response_model=UserPublic, status_code=201)
def create_professional_account(
    professional_id: int,
    body: ProfessionalAccountCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    """Issue the login a professional uses for the /professionals/me endpoints."""
    tenant_id = tenant_id_of(current_user)

    professional = session.get(Professional, professional_id)
    if professional is None or professional.tenant_id != tenant_id:
        raise HTTPException(status_code=404, detail="Professional not found")

    # one login per professional
    taken = session.exec(
        select(User).where(User.professional_id == professional_id)
    ).first()
    if taken is not None:
        raise HTTPException(status_code=409, detail="Professional already has an account")

    if session.exec(select(User).where(User.email == body.email)).first() is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        role=UserRole.professional.value,
        tenant_id=tenant_id,
        professional_id=professional_id,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user_to_dict(user)
