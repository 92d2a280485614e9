# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from apptest import AppTestCase

from healthglow.app_db import db_conn


class TestProfile(AppTestCase):
    def test_missing_profile_is_null(self) -> None:
        headers = self.register()
        resp = self.client.get("/api/profile", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json())

    def test_post_then_get_round_trips(self) -> None:
        headers = self.register()
        posted = {
            "age": 34,
            "weight": 70.5,
            "height": 172.0,
            "sex": "female",
            "bloodType": "O+",
            "emergencyContact": {"name": "Sam", "phone": "555-0100"},
            "medicalConditions": ["asthma"],
            "allergies": ["peanuts", "shellfish"],
            "medications": ["salbutamol"],
            "familyHistory": {"diabetes": ["father"]},
        }
        resp = self.client.post("/api/profile", json=posted, headers=headers)
        self.assertEqual(resp.status_code, 200, resp.text)

        resp = self.client.get("/api/profile", headers=headers)
        self.assertEqual(resp.status_code, 200)
        profile = resp.json()
        for key, value in posted.items():
            self.assertEqual(profile[key], value, key)
        self.assertEqual(profile["userId"], self.last_user["id"])
        self.assertTrue(profile["createdAt"])
        self.assertTrue(profile["updatedAt"])

    def test_second_post_replaces_the_single_row(self) -> None:
        headers = self.register()
        first = self.client.post("/api/profile", json={"age": 30, "weight": 80, "allergies": ["nuts"]}, headers=headers)
        self.assertEqual(first.status_code, 200)
        second = self.client.post("/api/profile", json={"age": 31, "bloodType": "A-"}, headers=headers)
        self.assertEqual(second.status_code, 200)

        body = second.json()
        self.assertEqual(body["id"], first.json()["id"])
        self.assertEqual(body["age"], 31)
        self.assertEqual(body["bloodType"], "A-")
        self.assertIsNone(body["weight"])
        self.assertIsNone(body["allergies"])

        with db_conn(self.settings.db_path) as conn:
            n = conn.execute(
                "SELECT COUNT(1) AS n FROM user_profiles WHERE user_id = ?",
                (self.last_user["id"],),
            ).fetchone()["n"]
        self.assertEqual(n, 1)

    def test_invalid_profile_is_400(self) -> None:
        headers = self.register()
        resp = self.client.post("/api/profile", json={"age": "old"}, headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("age", resp.json()["message"])

        resp = self.client.post("/api/profile", json={"bloodType": "AB+/Rh-null"}, headers=headers)
        self.assertEqual(resp.status_code, 400)

    def test_profiles_are_per_user(self) -> None:
        alice = self.register("alice@example.com")
        bob = self.register("bob@example.com")
        self.client.post("/api/profile", json={"age": 40}, headers=alice)

        resp = self.client.get("/api/profile", headers=bob)
        self.assertIsNone(resp.json())


if __name__ == "__main__":
    unittest.main()
