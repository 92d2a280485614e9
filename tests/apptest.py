# -*- coding: utf-8 -*-
"""Shared fixtures for the API test suites."""

from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from typing import Dict

from fastapi.testclient import TestClient

from healthglow.analysis import FoodAnalyzer
from healthglow.api import create_app
from healthglow.config import Settings


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="healthglow-test-"))
        os.environ["HEALTHGLOW_DB_PATH"] = str(self._tmp / "healthglow.db")
        os.environ["HEALTHGLOW_JWT_SECRET"] = "test-secret"
        os.environ["ANTHROPIC_API_KEY"] = "test-key"
        self.settings = Settings()
        self.app = create_app(self.settings, analyzer=self.make_analyzer())
        self.storage = self.app.state.storage
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        shutil.rmtree(self._tmp, ignore_errors=True)

    def make_analyzer(self) -> FoodAnalyzer | None:
        return None

    def register(self, email: str = "demo@example.com", password: str = "password123", **extra) -> Dict[str, str]:
        """Register a user and return bearer auth headers for it."""
        resp = self.client.post("/api/auth/register", json={"email": email, "password": password, **extra})
        self.assertEqual(resp.status_code, 200, resp.text)
        # Tests pass credentials explicitly so several users can share one client.
        self.client.cookies.clear()
        payload = resp.json()
        self.last_user = payload["user"]
        return {"Authorization": f"Bearer {payload['token']}"}
