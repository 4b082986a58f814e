"""Admin authentication API endpoints"""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from jose import JWTError, jwt
import structlog

from app.config import Settings, get_settings
from app.schemas.auth import LoginRequest, SessionResponse

router = APIRouter()
logger = structlog.get_logger()

COOKIE_NAME = "admin-token"


def create_access_token(settings: Settings) -> str:
    """Create admin JWT"""
    now = datetime.now(timezone.utc)
    payload = {
        "role": "admin",
        "iat": now,
        "exp": now + timedelta(hours=settings.access_token_expire_hours),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: Optional[str], settings: Settings) -> bool:
    """Check signature, expiry and role of an admin JWT"""
    if not token:
        return False
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return False
    return payload.get("role") == "admin"


async def get_session(
    admin_token: Optional[str] = Cookie(default=None, alias=COOKIE_NAME),
    settings: Settings = Depends(get_settings),
) -> bool:
    """Dependency guarding admin routes"""
    if not verify_token(admin_token, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return True


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
):
    """Check the admin password and set the session cookie"""
    if not settings.admin_password:
        logger.error("Admin password is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")

    if not hmac.compare_digest(request.password.encode(), settings.admin_password.encode()):
        logger.warning("Admin login failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
        )

    token = create_access_token(settings)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_hours * 3600,
        path="/",
    )

    logger.info("Admin logged in")
    return SessionResponse(authenticated=True)


@router.get("/check", response_model=SessionResponse)
async def check_session(
    admin_token: Optional[str] = Cookie(default=None, alias=COOKIE_NAME),
    settings: Settings = Depends(get_settings),
):
    """Report whether the session cookie is valid"""
    return SessionResponse(authenticated=verify_token(admin_token, settings))


@router.post("/logout", response_model=SessionResponse)
async def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(COOKIE_NAME, path="/")
    return SessionResponse(authenticated=False)
