# -*- coding: utf-8 -*-
"""HRV — Pydantic models.

Samples arrive from wearables and third-party APIs in loosely shaped
payloads, so every field is optional and unknown keys are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ..schemas import CamelModel


class HRVSampleCreate(CamelModel):
    timestamp: Optional[datetime] = Field(None, description="Sample time; defaults to now")
    rmssd: Optional[float] = Field(None, ge=0, description="ms")
    pnn50: Optional[float] = Field(None, ge=0, le=100, description="%")
    heart_rate: Optional[int] = Field(None, ge=0, le=300, description="bpm")
    stress_level: Optional[int] = Field(None, ge=0, le=100)
    source_device: Optional[str] = Field(None, max_length=100)
    source_api: Optional[str] = Field(None, max_length=50)
    raw_data: Optional[Any] = None


class HRVSample(CamelModel):
    id: int
    user_id: str
    timestamp: str
    rmssd: Optional[float] = None
    pnn50: Optional[float] = None
    heart_rate: Optional[int] = None
    stress_level: Optional[int] = None
    source_device: Optional[str] = None
    source_api: Optional[str] = None
    raw_data: Optional[Any] = None
