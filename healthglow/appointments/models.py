# -*- coding: utf-8 -*-
"""Appointments — Pydantic models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from ..schemas import CamelModel

AppointmentStatus = Literal["scheduled", "completed", "cancelled", "rescheduled"]


class AppointmentCreate(CamelModel):
    doctor_id: str = Field(..., min_length=1)
    appointment_date: datetime
    duration: int = Field(30, ge=1, le=24 * 60, description="minutes")
    status: AppointmentStatus = "scheduled"
    type: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    video_call_url: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    is_paid: bool = False


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus


class Appointment(CamelModel):
    id: int
    patient_id: str
    doctor_id: str
    appointment_date: str
    duration: int = 30
    status: AppointmentStatus = "scheduled"
    type: Optional[str] = None
    notes: Optional[str] = None
    video_call_url: Optional[str] = None
    price: Optional[float] = None
    is_paid: bool = False
    created_at: str
    updated_at: str
