# -*- coding: utf-8 -*-
"""AI-assisted nutrition analysis of meal photos and descriptions."""

from .nutrition import FoodAnalysisError, FoodAnalyzer

__all__ = ["FoodAnalysisError", "FoodAnalyzer"]
