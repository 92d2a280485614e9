# -*- coding: utf-8 -*-
"""Medical documents — API endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..deps import get_storage
from ..storage import Storage
from .models import MedicalDocument, MedicalDocumentCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/medical-documents", tags=["Medical documents"])


@router.get("", response_model=List[MedicalDocument], summary="List my medical documents")
def list_medical_documents(user: dict = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    try:
        return storage.get_medical_documents(user["id"])
    except Exception as exc:
        logger.exception("Error fetching medical documents")
        raise HTTPException(status_code=500, detail="Failed to fetch medical documents") from exc


@router.post("", response_model=MedicalDocument, summary="Register an uploaded medical document")
def create_medical_document(
    request: MedicalDocumentCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_medical_document({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating medical document")
        raise HTTPException(status_code=500, detail="Failed to create medical document") from exc
