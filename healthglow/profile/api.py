# -*- coding: utf-8 -*-
"""Profile — API endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..deps import get_storage
from ..storage import Storage
from .models import UserProfile, UserProfileUpsert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=Optional[UserProfile], summary="Get my health profile")
def get_profile(user: dict = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    """Returns ``null`` when no profile has been saved yet."""
    try:
        return storage.get_user_profile(user["id"])
    except Exception as exc:
        logger.exception("Error fetching profile")
        raise HTTPException(status_code=500, detail="Failed to fetch profile") from exc


@router.post("", response_model=UserProfile, summary="Create or replace my health profile")
def upsert_profile(
    request: UserProfileUpsert,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.upsert_user_profile({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error updating profile")
        raise HTTPException(status_code=500, detail="Failed to update profile") from exc
