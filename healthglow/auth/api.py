# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import Settings
from ..deps import get_settings, get_storage
from ..storage import EmailTakenError, Storage
from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic, UserUpdateRequest
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_auth_cookie(resp: Response, token: str, settings: Settings) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register(
    request: RegisterRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    storage: Storage = Depends(get_storage),
):
    if storage.get_user_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user = storage.create_user(
            {
                "email": request.email,
                "password_hash": hash_password(request.password),
                "first_name": request.first_name,
                "last_name": request.last_name,
                "user_type": request.user_type,
            }
        )
    except EmailTakenError as exc:
        raise HTTPException(status_code=400, detail="Email already registered") from exc
    logger.info("registered user %s", user["id"])

    token = create_access_token(user_id=user["id"], email=user["email"], settings=settings)
    _set_auth_cookie(response, token, settings)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(
    request: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    storage: Storage = Depends(get_storage),
):
    user = storage.get_user_by_email(request.email)
    if not user or not verify_password(request.password, user.get("password_hash")):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(user_id=user["id"], email=user["email"], settings=settings)
    _set_auth_cookie(response, token, settings)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/logout", summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return UserPublic.model_validate(user)


@router.put("/me", response_model=UserPublic, summary="Update current user")
def update_me(
    request: UserUpdateRequest,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    fields = request.model_dump(exclude_unset=True)
    try:
        updated = storage.upsert_user({"email": user["email"], **fields})
    except Exception as exc:
        logger.exception("Error updating user")
        raise HTTPException(status_code=500, detail="Failed to update user") from exc
    return UserPublic.model_validate(updated)
