"""
Mnemosyne Backend — Authentication Routes
===========================================

    POST /api/auth/register   201, access token in body, refresh token in cookie
    POST /api/auth/login      200, same shape as register
    POST /api/auth/refresh    200, new access token from the refresh cookie
    POST /api/auth/logout     200, clears the refresh cookie
    GET  /api/auth/me         200, caller's profile (bearer token required)

Refresh cookie: httpOnly, SameSite=strict, Secure in production,
max-age = REFRESH_TOKEN_EXPIRE_DAYS.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.config import settings
from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user
from mnemosyne.models.user import User
from mnemosyne.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenResponse,
)
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.schemas.user import AuthUser, UserProfile
from mnemosyne.services.auth_service import IssuedTokens, auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )


def _auth_payload(response: Response, issued: IssuedTokens) -> ApiResponse[AuthResponse]:
    _set_refresh_cookie(response, issued.refresh_token)
    return ApiResponse[AuthResponse](
        data=AuthResponse(
            user=AuthUser.model_validate(issued.user),
            access_token=issued.access_token,
        )
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[AuthResponse]:
    issued = await auth_service.register(db, body)
    return _auth_payload(response, issued)


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    responses={401: {"model": ErrorResponse}},
    summary="Exchange credentials for tokens",
)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[AuthResponse]:
    issued = await auth_service.login(db, body)
    return _auth_payload(response, issued)


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    responses={401: {"model": ErrorResponse}},
    summary="Issue a new access token from the refresh cookie",
)
async def refresh(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[TokenResponse]:
    token = request.cookies.get(settings.refresh_cookie_name)
    access_token = await auth_service.refresh(db, token)
    return ApiResponse[TokenResponse](data=TokenResponse(access_token=access_token))


@router.post("/logout", response_model=ApiResponse, summary="Clear the refresh cookie")
async def logout(response: Response) -> ApiResponse:
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )
    return ApiResponse(data={"message": "Logged out successfully."})


@router.get(
    "/me",
    response_model=ApiResponse[MeResponse],
    responses={401: {"model": ErrorResponse}},
    summary="Current user's profile",
)
async def me(user: User = Depends(get_current_user)) -> ApiResponse[MeResponse]:
    return ApiResponse[MeResponse](data=MeResponse(user=UserProfile.model_validate(user)))
