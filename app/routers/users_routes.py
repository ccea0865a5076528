# app/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.db import get_session
from app.models import Tenant, User
from app.schemas import UserCreate, UserPublic, UserRole
from app.auth import get_current_user, hash_password, user_to_dict

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Professional logins are issued by their tenant
    if user.role == UserRole.professional:
        raise HTTPException(
            status_code=403,
            detail="Professional accounts are created by their tenant",
        )

    # 2) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 3) A tenant account opens its shop
    tenant_id = None
    if user.role == UserRole.tenant:
        if not user.shop_name:
            raise HTTPException(status_code=422, detail="shop_name is required for tenant accounts")
        tenant = Tenant(name=user.shop_name)
        session.add(tenant)
        session.flush()  # fills tenant.id
        tenant_id = tenant.id

    # 4) Create user in DB
    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role.value,
        tenant_id=tenant_id,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    return user_to_dict(db_user)
