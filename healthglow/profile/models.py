# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..schemas import CamelModel


class UserProfileUpsert(CamelModel):
    age: Optional[int] = Field(None, ge=0, le=150)
    weight: Optional[float] = Field(None, ge=0, le=1000, description="kg")
    height: Optional[float] = Field(None, ge=0, le=300, description="cm")
    sex: Optional[str] = Field(None, max_length=10)
    blood_type: Optional[str] = Field(None, max_length=5)
    emergency_contact: Optional[Dict[str, Any]] = None
    medical_conditions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    family_history: Optional[Any] = None


class UserProfile(CamelModel):
    id: int
    user_id: str
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    sex: Optional[str] = None
    blood_type: Optional[str] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    medical_conditions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    family_history: Optional[Any] = None
    created_at: str
    updated_at: str
