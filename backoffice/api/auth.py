"""Auth API router — login and logout."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.security import extract_session_token, security_scheme
from backoffice.db.session import get_db
from backoffice.schemas.schemas import LoginRequest, MessageResponse, UserOut
from backoffice.services.auth_service import auth_service

router = APIRouter(tags=["auth"])


@router.post("/login")
def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Authenticate and open a session carried by an HttpOnly cookie."""
    token, user = auth_service.login(db, body.username, body.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRY_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return {"user": UserOut.model_validate(user)}


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
):
    """Invalidate the current session, if any."""
    token = extract_session_token(request, credentials)
    if token:
        auth_service.logout(db, token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")
