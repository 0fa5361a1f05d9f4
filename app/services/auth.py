"""Registration, login and refresh-token exchange use cases."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import jwt
from pydantic import ValidationError

from app.core.errors import AppError, RepositoryError
from app.core.security import TokenIssuer, hash_password, new_id, verify_password
from app.models import Authentication, User
from app.repositories.auth import REFRESH_TOKEN_NOT_FOUND, AuthRepository
from app.schemas.auth import AuthData, LoginRequest, RegistrationRequest, UserPublic
from app.schemas.response import ApiResponse
from app.services.responses import domain_failed, internal_failed, validation_failed

logger = logging.getLogger(__name__)

REGISTER_FAILED = "fail to create your account, please try again later"
REQUEST_FAILED = "fail to process your request, please try again later"


class AuthService:
    """Orchestrates sign-up, sign-in and refresh; returns ready-to-send envelopes."""

    def __init__(self, repository: AuthRepository, tokens: TokenIssuer) -> None:
        self.repository = repository
        self.tokens = tokens

    def _issue(
        self,
        code: int,
        user: UserPublic,
        refresh_token: str,
        failure_message: str,
    ) -> ApiResponse[AuthData]:
        try:
            access_token = self.tokens.issue(user)
        except (jwt.PyJWTError, NotImplementedError, TypeError):
            logger.exception("Access token signing failed", extra={"user_id": user.id})
            return internal_failed(failure_message)
        return ApiResponse[AuthData].success(
            code,
            AuthData(user=user, access_token=access_token, refresh_token=refresh_token),
        )

    def register(
        self,
        payload: Mapping[str, Any],
        agent: str = "",
        remote_ip: str = "",
    ) -> ApiResponse[AuthData]:
        """
        Create an account with the member role and open its first session.

        Returns 201 with the public user, an access token and a refresh token.
        Validation failures return 400 with per-field details before anything is
        generated or persisted.
        """
        try:
            request = RegistrationRequest.model_validate(payload)
        except ValidationError as e:
            logger.info("Registration rejected: invalid input", extra={"error_count": e.error_count()})
            return validation_failed(e)

        user_id, authentication_id, refresh_token = new_id(), new_id(), new_id()
        try:
            password_hash = hash_password(request.password)
        except (ValueError, TypeError):
            logger.exception("Password hashing failed during registration")
            return internal_failed(REGISTER_FAILED)

        now = datetime.now(UTC)
        try:
            user = self.repository.register(
                User(
                    id=user_id,
                    fullname=request.fullname,
                    email=str(request.email),
                    password_hash=password_hash,
                    created_at=now,
                ),
                Authentication(
                    id=authentication_id,
                    refresh_token=refresh_token,
                    last_login=now,
                    remote_ip=remote_ip,
                    agent=agent,
                    user_id=user_id,
                ),
            )
        except AppError as e:
            logger.info("Registration rejected", extra={"status": e.code, "reason": e.message})
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Registration failed", extra={"user_id": user_id})
            return internal_failed(REQUEST_FAILED)

        logger.info("User registered", extra={"user_id": user.id})
        return self._issue(201, user, refresh_token, REGISTER_FAILED)

    def login(
        self,
        payload: Mapping[str, Any],
        agent: str = "",
        remote_ip: str = "",
    ) -> ApiResponse[AuthData]:
        """
        Verify credentials and open a new session.

        An unknown email and a wrong password produce the same 400 response.
        """
        try:
            request = LoginRequest.model_validate(payload)
        except ValidationError as e:
            logger.info("Login rejected: invalid input", extra={"error_count": e.error_count()})
            return validation_failed(e)

        refresh_token, authentication_id = new_id(), new_id()
        try:
            user = self.repository.login_by_email(
                str(request.email),
                Authentication(
                    id=authentication_id,
                    refresh_token=refresh_token,
                    last_login=datetime.now(UTC),
                    remote_ip=remote_ip,
                    agent=agent,
                ),
                lambda stored_hash: verify_password(request.password, stored_hash),
            )
        except AppError as e:
            logger.info("Login rejected", extra={"status": e.code, "reason": e.message})
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Login failed")
            return internal_failed(REQUEST_FAILED)

        public = UserPublic(id=user.id, email=user.email, fullname=user.fullname, roles=user.roles)
        return self._issue(200, public, refresh_token, REQUEST_FAILED)

    def refresh(self, token: str | None) -> ApiResponse[AuthData]:
        """Exchange a refresh token for a new access token; the refresh token is returned unchanged."""
        if not token:
            return ApiResponse.fail(401, REFRESH_TOKEN_NOT_FOUND)
        try:
            user = self.repository.find_refresh_token(token)
        except AppError as e:
            logger.info("Refresh rejected", extra={"status": e.code, "reason": e.message})
            return domain_failed(e)
        except RepositoryError:
            logger.exception("Refresh token lookup failed")
            return internal_failed(
                "something went wrong, generate new access token fail, please try again later"
            )
        return self._issue(200, user, token, REQUEST_FAILED)
