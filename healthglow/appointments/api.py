# -*- coding: utf-8 -*-
"""Appointments — API endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from ..auth.security import get_current_user
from ..deps import get_storage
from ..schemas import MAX_ROW_ID, MessageResponse
from ..storage import Storage
from .models import Appointment, AppointmentCreate, AppointmentStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.get("", response_model=List[Appointment], summary="List my appointments as patient")
def list_appointments(user: dict = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    try:
        return storage.get_appointments(user["id"])
    except Exception as exc:
        logger.exception("Error fetching appointments")
        raise HTTPException(status_code=500, detail="Failed to fetch appointments") from exc


@router.post("", response_model=Appointment, summary="Book an appointment")
def create_appointment(
    request: AppointmentCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_appointment({**request.model_dump(), "patient_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating appointment")
        raise HTTPException(status_code=500, detail="Failed to create appointment") from exc


@router.patch("/{appointment_id}/status", response_model=MessageResponse, summary="Change appointment status")
def update_appointment_status(
    request: AppointmentStatusUpdate,
    appointment_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        updated = storage.update_appointment_status(appointment_id, request.status, user_id=user["id"])
    except Exception as exc:
        logger.exception("Error updating appointment status")
        raise HTTPException(status_code=500, detail="Failed to update appointment status") from exc
    if not updated:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return MessageResponse(message="Appointment status updated")
