"""
Account routes: invitation-only registration and password login.
"""

import re
from datetime import timedelta

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from api.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from core.dependencies import get_jwt_secret, get_settings
from core.errors import AlreadyExists, InvalidArgument, Unauthenticated
from core.logging import BusinessEvents
from core.security import hash_password, issue_token, verify_password
from core.settings import Settings
from db.models import User
from db.session import get_db

log = structlog.get_logger(__name__)

router = APIRouter()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


@router.post("/register", response_model=RegisterResponse)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a new user account. Requires the configured invitation code."""
    if req.invitation_code != settings.INVITATION_CODE:
        raise InvalidArgument("Invalid invitation code")
    if not EMAIL_RE.match(req.email):
        raise InvalidArgument("Invalid email format")
    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgument(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    existing = db.execute(select(User.id).filter(User.email == req.email)).first()
    if existing:
        raise AlreadyExists("User with this email already exists")

    user = User(
        email=req.email,
        password_hash=hash_password(req.password),
        first_name=req.first_name,
        last_name=req.last_name,
    )
    db.add(user)
    db.commit()

    log.info(BusinessEvents.USER_REGISTERED, user_id=user.id)
    return RegisterResponse(
        user_id=str(user.id),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    secret: str = Depends(get_jwt_secret),
):
    """Authenticate with email and password and receive a 7-day bearer token."""
    user = db.execute(select(User).filter(User.email == req.email)).scalars().first()

    # Same error for unknown email and wrong password
    if user is None or not verify_password(user.password_hash, req.password):
        log.info(BusinessEvents.USER_LOGIN_FAILED)
        raise Unauthenticated("Invalid email or password")

    token = issue_token(
        user.id, user.email, secret, ttl=timedelta(days=settings.TOKEN_TTL_DAYS)
    )
    log.info(BusinessEvents.USER_LOGIN, user_id=user.id)
    return LoginResponse(
        token=token,
        user=UserSummary(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        ),
    )
