# -*- coding: utf-8 -*-
"""Medical documents — Pydantic models.

Only metadata lives here; the file itself sits behind ``file_url``.
``encrypted_key`` is stored as given and never interpreted.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from ..schemas import CamelModel


class MedicalDocumentCreate(CamelModel):
    document_type: str = Field(..., min_length=1, max_length=50, description="lab_result, imaging, prescription, ...")
    title: str = Field(..., min_length=1, max_length=200)
    file_url: str = Field(..., min_length=1)
    encrypted_key: Optional[str] = None
    document_date: Optional[date] = None
    doctor_name: Optional[str] = Field(None, max_length=100)
    facility_name: Optional[str] = Field(None, max_length=200)
    tags: Optional[List[str]] = None
    is_shared: bool = False


class MedicalDocument(CamelModel):
    id: int
    user_id: str
    document_type: str
    title: str
    file_url: str
    encrypted_key: Optional[str] = None
    upload_date: str
    document_date: Optional[str] = None
    doctor_name: Optional[str] = None
    facility_name: Optional[str] = None
    tags: Optional[List[str]] = None
    is_shared: bool = False
