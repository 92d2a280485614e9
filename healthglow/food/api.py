# -*- coding: utf-8 -*-
"""Food — entries, reactions and AI nutrition analysis endpoints."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..analysis import FoodAnalysisError, FoodAnalyzer
from ..auth.security import get_current_user
from ..config import Settings
from ..deps import get_analyzer, get_settings, get_storage
from ..storage import Storage
from .models import (
    AnalyzeFoodImageRequest,
    AnalyzeFoodTextRequest,
    FoodEntry,
    FoodEntryCreate,
    FoodReaction,
    FoodReactionCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Food"])


def _parse_bound(value: str, *, end: bool) -> datetime:
    """Parse a range bound; a bare YYYY-MM-DD covers the whole day."""
    text = value.strip()
    if len(text) == 10:
        day = date.fromisoformat(text)
        return datetime.combine(day, time.max if end else time.min, tzinfo=timezone.utc)
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def _check_image_or_400(image_base64: str, max_bytes: int) -> None:
    try:
        data = base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid base64 image: {exc}") from exc
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image too large: {len(data)} bytes > {max_bytes}")


@router.get("/food-entries", response_model=List[FoodEntry], summary="List food entries, newest first")
def list_food_entries(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        if limit is None:
            return storage.get_food_entries(user["id"])
        return storage.get_food_entries(user["id"], limit)
    except Exception as exc:
        logger.exception("Error fetching food entries")
        raise HTTPException(status_code=500, detail="Failed to fetch food entries") from exc


@router.post("/food-entries", response_model=FoodEntry, summary="Log a meal")
def create_food_entry(
    request: FoodEntryCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_food_entry({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating food entry")
        raise HTTPException(status_code=500, detail="Failed to create food entry") from exc


@router.get("/food-entries/range", response_model=List[FoodEntry], summary="Food entries within a date range")
def list_food_entries_in_range(
    start_date: Optional[str] = Query(default=None, alias="startDate", description="YYYY-MM-DD or ISO8601"),
    end_date: Optional[str] = Query(default=None, alias="endDate", description="YYYY-MM-DD or ISO8601"),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="Start date and end date are required")
    try:
        start = _parse_bound(start_date, end=False)
        end = _parse_bound(end_date, end=True)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid date range: {exc}") from exc

    try:
        return storage.get_food_entries_by_date_range(user["id"], start, end)
    except Exception as exc:
        logger.exception("Error fetching food entries by date range")
        raise HTTPException(status_code=500, detail="Failed to fetch food entries") from exc


@router.post("/analyze-food-image", summary="Estimate nutrition from a meal photo")
def analyze_food_image(
    request: Optional[AnalyzeFoodImageRequest] = None,
    user: dict = Depends(get_current_user),  # noqa: ARG001
    settings: Settings = Depends(get_settings),
    analyzer: FoodAnalyzer = Depends(get_analyzer),
):
    if request is None or not request.base64_image:
        raise HTTPException(status_code=400, detail="Base64 image is required")
    _check_image_or_400(request.base64_image, settings.max_image_bytes)

    try:
        return analyzer.analyze_image(request.base64_image, request.media_type)
    except FoodAnalysisError as exc:
        logger.error("Error analyzing food image: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/analyze-food-text", summary="Estimate nutrition from a meal description")
def analyze_food_text(
    request: Optional[AnalyzeFoodTextRequest] = None,
    user: dict = Depends(get_current_user),  # noqa: ARG001
    analyzer: FoodAnalyzer = Depends(get_analyzer),
):
    if request is None or not (request.description or "").strip():
        raise HTTPException(status_code=400, detail="Food description is required")

    try:
        return analyzer.analyze_text(request.description.strip())
    except FoodAnalysisError as exc:
        logger.error("Error analyzing food text: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/food-reactions", response_model=List[FoodReaction], summary="List food reactions, newest first")
def list_food_reactions(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        if limit is None:
            return storage.get_food_reactions(user["id"])
        return storage.get_food_reactions(user["id"], limit)
    except Exception as exc:
        logger.exception("Error fetching food reactions")
        raise HTTPException(status_code=500, detail="Failed to fetch food reactions") from exc


@router.post("/food-reactions", response_model=FoodReaction, summary="Record a reaction to a food")
def create_food_reaction(
    request: FoodReactionCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        entry_found = request.food_entry_id is None or storage.get_food_entry(request.food_entry_id, user["id"])
        if entry_found:
            return storage.create_food_reaction({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating food reaction")
        raise HTTPException(status_code=500, detail="Failed to create food reaction") from exc
    raise HTTPException(status_code=404, detail="Food entry not found")
