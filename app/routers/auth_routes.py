# app/routers/auth_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from app.auth import create_access_token, verify_password
from app.db import get_session
from app.logging_config import get_logger
from app.models import User
from app.schemas import Token

logger = get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2 password flow: the form's "username" carries the e-mail
    user = session.exec(
        select(User).where(User.email == form_data.username)
    ).first()

    if user is None or not verify_password(form_data.password, user.password_hash):
        logger.info("login_failed", email=form_data.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("login_succeeded", user_id=user.id, role=user.role)
    return {"access_token": create_access_token(user), "token_type": "bearer"}
