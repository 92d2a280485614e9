# -*- coding: utf-8 -*-
"""AI assistant conversations — API endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from ..auth.security import get_current_user
from ..deps import get_storage
from ..schemas import MAX_ROW_ID
from ..storage import Storage
from .models import AIConversation, AIConversationCreate, AIConversationUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-conversations", tags=["AI conversations"])


@router.get("", response_model=List[AIConversation], summary="List my assistant conversations")
def list_ai_conversations(user: dict = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    try:
        return storage.get_ai_conversations(user["id"])
    except Exception as exc:
        logger.exception("Error fetching AI conversations")
        raise HTTPException(status_code=500, detail="Failed to fetch AI conversations") from exc


@router.post("", response_model=AIConversation, summary="Save an assistant conversation")
def create_ai_conversation(
    request: AIConversationCreate,
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_ai_conversation({**request.model_dump(), "user_id": user["id"]})
    except Exception as exc:
        logger.exception("Error creating AI conversation")
        raise HTTPException(status_code=500, detail="Failed to create AI conversation") from exc


@router.patch("/{conversation_id}", response_model=AIConversation, summary="Update an assistant conversation")
def update_ai_conversation(
    request: AIConversationUpdate,
    conversation_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    try:
        row = storage.update_ai_conversation(conversation_id, user["id"], request.model_dump(exclude_none=True))
    except Exception as exc:
        logger.exception("Error updating AI conversation")
        raise HTTPException(status_code=500, detail="Failed to update AI conversation") from exc
    if row is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return row
