# -*- coding: utf-8 -*-

from __future__ import annotations

import time
import unittest
from unittest import mock

from apptest import AppTestCase

from healthglow.auth.security import _jwt_encode, create_access_token


class TestAuth(AppTestCase):
    def test_requests_without_credentials_are_rejected(self) -> None:
        for path in ("/api/profile", "/api/food-entries", "/api/hrv-data", "/api/appointments"):
            resp = self.client.get(path)
            self.assertEqual(resp.status_code, 401, path)
            self.assertEqual(resp.json(), {"message": "Not authenticated"})

    def test_health_is_public(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_register_login_and_me(self) -> None:
        headers = self.register("Ada@Example.com", firstName="Ada", userType="doctor")
        self.assertEqual(self.last_user["email"], "ada@example.com")
        self.assertEqual(self.last_user["userType"], "doctor")

        resp = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["firstName"], "Ada")

        resp = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["token"])

        # Login also sets the auth cookie.
        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 200)

    def test_duplicate_email_and_bad_password(self) -> None:
        self.register("dup@example.com")
        resp = self.client.post("/api/auth/register", json={"email": "dup@example.com", "password": "password123"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Email already registered")

        resp = self.client.post("/api/auth/login", json={"email": "dup@example.com", "password": "wrong-password"})
        self.assertEqual(resp.status_code, 401)

    def test_register_race_does_not_replace_existing_account(self) -> None:
        self.register("taken@example.com")

        # Simulate a concurrent registration that passed the lookup before the first insert landed.
        with mock.patch.object(self.storage, "get_user_by_email", return_value=None):
            resp = self.client.post(
                "/api/auth/register",
                json={"email": "taken@example.com", "password": "other-password"},
            )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Email already registered"})

        resp = self.client.post("/api/auth/login", json={"email": "taken@example.com", "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post("/api/auth/login", json={"email": "taken@example.com", "password": "other-password"})
        self.assertEqual(resp.status_code, 401)

    def test_logout_clears_cookie(self) -> None:
        self.register("out@example.com")
        resp = self.client.post("/api/auth/login", json={"email": "out@example.com", "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/auth/me").status_code, 200)

        resp = self.client.post("/api/auth/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Not authenticated"})

    def test_register_validation_is_400(self) -> None:
        resp = self.client.post("/api/auth/register", json={"email": "short@example.com", "password": "123"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("password", resp.json()["message"])

    def test_invalid_and_expired_tokens(self) -> None:
        self.register()
        user_id = self.last_user["id"]

        resp = self.client.get("/api/profile", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(resp.status_code, 401)

        forged = _jwt_encode({"sub": user_id, "exp": int(time.time()) + 60}, "other-secret")
        resp = self.client.get("/api/profile", headers={"Authorization": f"Bearer {forged}"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid token")

        expired = _jwt_encode({"sub": user_id, "exp": int(time.time()) - 60}, "test-secret")
        resp = self.client.get("/api/profile", headers={"Authorization": f"Bearer {expired}"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Token expired")

        ghost = create_access_token(user_id="no-such-user", email="ghost@example.com", settings=self.settings)
        resp = self.client.get("/api/profile", headers={"Authorization": f"Bearer {ghost}"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "User not found")

    def test_update_me_keeps_identity_and_password(self) -> None:
        headers = self.register("upd@example.com")
        user_id = self.last_user["id"]

        resp = self.client.put("/api/auth/me", json={"firstName": "Grace", "lastName": "Hopper"}, headers=headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["id"], user_id)
        self.assertEqual(body["firstName"], "Grace")
        self.assertEqual(body["lastName"], "Hopper")

        resp = self.client.post("/api/auth/login", json={"email": "upd@example.com", "password": "password123"})
        self.assertEqual(resp.status_code, 200)


if __name__ == "__main__":
    unittest.main()
