# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from healthglow.app_db import db_conn
from healthglow.storage import EmailTakenError, SQLiteStorage, format_timestamp


class TestSQLiteStorage(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="healthglow-storage-"))
        self.storage = SQLiteStorage(self._tmp / "app.db")
        self.storage.init_schema()
        self.user = self.storage.upsert_user({"email": "Demo@Example.com", "password_hash": "x", "first_name": "Demo"})

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_upsert_user_keeps_id_on_conflict(self) -> None:
        again = self.storage.upsert_user({"email": "demo@example.com", "first_name": "Renamed"})
        self.assertEqual(again["id"], self.user["id"])
        self.assertEqual(again["first_name"], "Renamed")
        self.assertEqual(again["password_hash"], "x")
        self.assertEqual(again["created_at"], self.user["created_at"])
        self.assertEqual(self.storage.get_user_by_email("DEMO@example.com")["id"], self.user["id"])

    def test_create_user_rejects_taken_email(self) -> None:
        with self.assertRaises(EmailTakenError):
            self.storage.create_user({"email": "DEMO@example.com", "password_hash": "y"})
        self.assertEqual(self.storage.get_user(self.user["id"])["password_hash"], "x")

        other = self.storage.create_user({"email": "Other@Example.com", "password_hash": "z", "user_type": "doctor"})
        self.assertEqual(other["email"], "other@example.com")
        self.assertEqual(other["user_type"], "doctor")

    def test_point_lookups_return_none(self) -> None:
        self.assertIsNone(self.storage.get_user("missing"))
        self.assertIsNone(self.storage.get_user_profile(self.user["id"]))
        self.assertIsNone(self.storage.get_food_entry(1, self.user["id"]))
        self.assertFalse(self.storage.update_appointment_status(1, "completed"))
        self.assertIsNone(self.storage.update_ai_conversation(1, self.user["id"], {"escalation_flag": True}))

    def test_deleting_user_cascades(self) -> None:
        uid = self.user["id"]
        entry = self.storage.create_food_entry({"user_id": uid, "description": "eggs"})
        self.storage.create_food_reaction({"user_id": uid, "food_entry_id": entry["id"], "food_item": "eggs"})
        self.storage.create_hrv_data({"user_id": uid, "rmssd": 42.0})
        self.storage.upsert_user_profile({"user_id": uid, "age": 30})

        with db_conn(self.storage.db_path) as conn:
            conn.execute("DELETE FROM users WHERE id = ?", (uid,))

        self.assertEqual(self.storage.get_food_entries(uid), [])
        self.assertEqual(self.storage.get_food_reactions(uid), [])
        self.assertEqual(self.storage.get_hrv_data(uid), [])
        self.assertIsNone(self.storage.get_user_profile(uid))

    def test_json_and_bool_columns_decode(self) -> None:
        doc = self.storage.create_medical_document(
            {"user_id": self.user["id"], "document_type": "imaging", "title": "X-ray", "file_url": "f", "tags": ["chest"], "is_shared": True}
        )
        self.assertEqual(doc["tags"], ["chest"])
        self.assertIs(doc["is_shared"], True)

    def test_format_timestamp_normalises_to_utc(self) -> None:
        self.assertEqual(format_timestamp("2024-01-01T12:00:00+02:00"), "2024-01-01T10:00:00.000Z")
        self.assertEqual(format_timestamp(datetime(2024, 1, 1, 12, 0)), "2024-01-01T12:00:00.000Z")
        self.assertEqual(
            format_timestamp(datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)),
            "2024-01-01T12:00:00.123Z",
        )


if __name__ == "__main__":
    unittest.main()
