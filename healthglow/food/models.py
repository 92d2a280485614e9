# -*- coding: utf-8 -*-
"""Food — Pydantic models."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from ..schemas import MAX_ROW_ID, CamelModel

Rating = Optional[Annotated[int, Field(ge=1, le=10)]]

ReactionSeverity = Literal["mild", "moderate", "severe"]

_DATA_URL = re.compile(r"^data:(?P<media>[^;,]*)[^,]*,")


class FoodEntryCreate(CamelModel):
    timestamp: Optional[datetime] = Field(None, description="When the meal was eaten; defaults to now")
    meal_type: Optional[str] = Field(None, max_length=20, description="breakfast | lunch | dinner | snack")
    description: Optional[str] = None
    image_url: Optional[str] = None
    voice_transcript: Optional[str] = None
    ai_analysis: Optional[Any] = None
    calories: Optional[int] = Field(None, ge=0, le=100_000, description="kcal")
    nutrients: Optional[Dict[str, Any]] = None
    mood_before: Rating = None
    mood_after: Rating = None
    energy_before: Rating = None
    energy_after: Rating = None
    digestion_rating: Rating = None


class FoodEntry(CamelModel):
    id: int
    user_id: str
    timestamp: str
    meal_type: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    voice_transcript: Optional[str] = None
    ai_analysis: Optional[Any] = None
    calories: Optional[int] = None
    nutrients: Optional[Dict[str, Any]] = None
    mood_before: Optional[int] = None
    mood_after: Optional[int] = None
    energy_before: Optional[int] = None
    energy_after: Optional[int] = None
    digestion_rating: Optional[int] = None


class FoodReactionCreate(CamelModel):
    food_entry_id: Optional[int] = Field(None, ge=1, le=MAX_ROW_ID)
    food_item: str = Field(..., min_length=1, max_length=200)
    reaction_type: Optional[str] = Field(None, max_length=100)
    severity: ReactionSeverity = "mild"
    symptoms: Optional[List[str]] = None
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None


class FoodReaction(CamelModel):
    id: int
    user_id: str
    food_entry_id: Optional[int] = None
    food_item: str
    reaction_type: Optional[str] = None
    severity: ReactionSeverity = "mild"
    symptoms: Optional[List[str]] = None
    timestamp: str
    notes: Optional[str] = None


class AnalyzeFoodImageRequest(CamelModel):
    base64_image: Optional[str] = None
    media_type: str = Field("image/jpeg", pattern=r"^image/(jpeg|png|gif|webp)$")

    @model_validator(mode="before")
    @classmethod
    def _split_data_url(cls, data: object) -> object:
        """Accept ``data:<media>;base64,<payload>``; the header fills ``mediaType`` when it is absent."""
        if not isinstance(data, dict):
            return data
        key = "base64_image" if "base64_image" in data else "base64Image"
        value = data.get(key)
        if not isinstance(value, str):
            return data

        data = dict(data)
        match = _DATA_URL.match(value)
        if match:
            value = value[match.end() :]
            media = (match.group("media") or "").lower()
            if media == "image/jpg":
                media = "image/jpeg"
            if media and data.get("mediaType") is None and data.get("media_type") is None:
                data["mediaType"] = media
        data[key] = "".join(value.split())
        return data


class AnalyzeFoodTextRequest(CamelModel):
    description: Optional[str] = None
