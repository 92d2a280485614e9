# -*- coding: utf-8 -*-
"""Shared pydantic base for the camelCase JSON surface."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case on input, emits camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# SQLite INTEGER ceiling; larger ids cannot match a row.
MAX_ROW_ID = 2**63 - 1
