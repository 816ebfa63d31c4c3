"""
ChoreoNotes Backend — Auth Route Handlers
==========================================

What:  POST /api/auth/register, /login, /logout and GET /api/auth/me.
How:   Thin wrappers around CredentialService. Tokens are stateless, so
       logout only acknowledges; the client discards its token.
"""

import logging

from fastapi import APIRouter, Depends, status

from choreonotes.dependencies import get_credential_service, get_current_user_id
from choreonotes.schemas.common import ErrorResponse, MessageResponse
from choreonotes.schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from choreonotes.services.credentials import CredentialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid payload", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    service: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    user, token = await service.register(body.email, body.password, body.username)
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Exchange credentials for a token",
)
async def login(
    body: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
) -> AuthResponse:
    user, token = await service.login(body.email, body.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(user_id: int = Depends(get_current_user_id)) -> MessageResponse:
    logger.info("User %s logged out", user_id)
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Current user profile",
)
async def me(
    user_id: int = Depends(get_current_user_id),
    service: CredentialService = Depends(get_credential_service),
) -> CurrentUserResponse:
    user = await service.get_current_user(user_id)
    return CurrentUserResponse(user=UserResponse.model_validate(user))
