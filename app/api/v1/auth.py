"""Sign-up, sign-in and refresh endpoints plus auth dependencies (get_current_user, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated, Any

import jwt
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.v1.common import client_ip, render, user_agent
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import TokenIssuer
from app.repositories.auth import AuthRepository
from app.schemas.auth import CurrentUser
from app.schemas.response import ApiResponse
from app.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

FORBIDDEN = "you don't have permission to access this resource"


def get_token_issuer() -> TokenIssuer:
    """Dependency: token issuer built from the current settings."""
    return TokenIssuer.from_settings(get_settings())


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthService:
    return AuthService(AuthRepository(db), tokens)


def _with_refresh_cookie(response: JSONResponse, result: ApiResponse[Any]) -> JSONResponse:
    """Attach the refresh token as an HTTP-only cookie scoped to the refresh endpoint."""
    if not result.ok or result.data is None:
        return response
    settings = get_settings()
    response.set_cookie(
        key=settings.REFRESH_TOKEN_COOKIE_NAME,
        value=result.data.refresh_token,
        max_age=settings.REFRESH_TOKEN_MAX_AGE_SEC,
        path=settings.refresh_token_cookie_path,
        secure=settings.REFRESH_TOKEN_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    """
    Register with fullname, email, password and password_confirmation.
    Returns the user with the member role, an access token and a refresh token (also set as a cookie).
    """
    result = service.register(body, agent=user_agent(request), remote_ip=client_ip(request))
    return _with_refresh_cookie(render(request, result), result)


@router.post("/signin")
def signin(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    """Authenticate with email and password; opens a new session and sets the refresh cookie."""
    result = service.login(body, agent=user_agent(request), remote_ip=client_ip(request))
    return _with_refresh_cookie(render(request, result), result)


@router.get("/refresh")
def refresh(
    request: Request,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    """Exchange the refresh-token cookie for a new access token."""
    refresh_token = request.cookies.get(get_settings().REFRESH_TOKEN_COOKIE_NAME)
    return render(request, service.refresh(refresh_token))


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> CurrentUser:
    """Dependency: require a valid Bearer access token and return its identity."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = tokens.decode(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.DecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed access token",
        )
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return CurrentUser.model_validate(claims)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing access token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_roles(*role_ids: int) -> Callable[[CurrentUser], CurrentUser]:
    """Dependency factory: require an authenticated user holding every role in role_ids. 403 otherwise."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_roles(*role_ids):
            logger.warning(
                "Role check failed",
                extra={"user_id": current_user.id, "required_roles": list(role_ids)},
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
        return current_user

    return dependency
