# -*- coding: utf-8 -*-
"""FastAPI dependencies resolving the per-app services built in `create_app`."""

from __future__ import annotations

from fastapi import Request

from .analysis.nutrition import FoodAnalyzer
from .config import Settings
from .storage import Storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_analyzer(request: Request) -> FoodAnalyzer:
    return request.app.state.analyzer
