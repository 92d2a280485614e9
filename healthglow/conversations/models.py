# -*- coding: utf-8 -*-
"""AI assistant conversations — Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..schemas import CamelModel


class AIConversationCreate(CamelModel):
    session_id: Optional[str] = Field(None, max_length=64, description="Generated when omitted")
    messages: List[Dict[str, Any]] = Field(..., description="Ordered transcript, e.g. {role, content}")
    symptoms: Optional[List[str]] = None
    recommendations: Optional[Any] = None
    escalation_flag: bool = False


class AIConversationUpdate(CamelModel):
    messages: Optional[List[Dict[str, Any]]] = None
    symptoms: Optional[List[str]] = None
    recommendations: Optional[Any] = None
    escalation_flag: Optional[bool] = None


class AIConversation(CamelModel):
    id: int
    user_id: str
    session_id: str
    messages: List[Dict[str, Any]]
    symptoms: Optional[List[str]] = None
    recommendations: Optional[Any] = None
    escalation_flag: bool = False
    created_at: str
    updated_at: str
