# -*- coding: utf-8 -*-
"""HRV — API endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..deps import get_storage
from ..storage import Storage
from .models import HRVSample, HRVSampleCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/hrv-data", tags=["HRV"])


@router.get("", response_model=List[HRVSample], summary="List HRV samples, newest first")
def list_hrv_data(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        if limit is None:
            return storage.get_hrv_data(user["id"])
        return storage.get_hrv_data(user["id"], limit)
    except Exception as exc:
        logger.exception("Error fetching HRV data")
        raise HTTPException(status_code=500, detail="Failed to fetch HRV data") from exc


@router.post("", response_model=HRVSample, summary="Record an HRV sample")
def create_hrv_data(
    request: HRVSampleCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_hrv_data({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating HRV data")
        raise HTTPException(status_code=500, detail="Failed to create HRV data") from exc
