# -*- coding: utf-8 -*-
"""Storage — one capability set, one SQLite adapter.

Rows come back as plain dicts with snake_case keys. JSON columns are decoded
and boolean columns are returned as ``bool``. A point lookup that matches
nothing returns ``None``; database errors propagate to the caller.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
from uuid import uuid4

from .app_db import db_conn, init_app_db

Row = Dict[str, Any]

DEFAULT_FOOD_ENTRY_LIMIT = 50
DEFAULT_HRV_LIMIT = 100
DEFAULT_REACTION_LIMIT = 100

_COLUMNS: Dict[str, tuple[str, ...]] = {
    "users": (
        "id", "email", "password_hash", "first_name", "last_name", "profile_image_url",
        "user_type", "created_at", "updated_at",
    ),
    "user_profiles": (
        "user_id", "age", "weight", "height", "sex", "blood_type", "emergency_contact",
        "medical_conditions", "allergies", "medications", "family_history", "created_at", "updated_at",
    ),
    "food_entries": (
        "user_id", "timestamp", "meal_type", "description", "image_url", "voice_transcript",
        "ai_analysis", "calories", "nutrients", "mood_before", "mood_after", "energy_before",
        "energy_after", "digestion_rating",
    ),
    "food_reactions": (
        "user_id", "food_entry_id", "food_item", "reaction_type", "severity", "symptoms",
        "timestamp", "notes",
    ),
    "hrv_data": (
        "user_id", "timestamp", "rmssd", "pnn50", "heart_rate", "stress_level", "source_device",
        "source_api", "raw_data",
    ),
    "appointments": (
        "patient_id", "doctor_id", "appointment_date", "duration", "status", "type", "notes",
        "video_call_url", "price", "is_paid", "created_at", "updated_at",
    ),
    "medical_documents": (
        "user_id", "document_type", "title", "file_url", "encrypted_key", "upload_date",
        "document_date", "doctor_name", "facility_name", "tags", "is_shared",
    ),
    "ai_conversations": (
        "user_id", "session_id", "messages", "symptoms", "recommendations", "escalation_flag",
        "created_at", "updated_at",
    ),
}

_JSON_COLUMNS: Dict[str, frozenset[str]] = {
    "user_profiles": frozenset(
        {"emergency_contact", "medical_conditions", "allergies", "medications", "family_history"}
    ),
    "food_entries": frozenset({"ai_analysis", "nutrients"}),
    "food_reactions": frozenset({"symptoms"}),
    "hrv_data": frozenset({"raw_data"}),
    "medical_documents": frozenset({"tags"}),
    "ai_conversations": frozenset({"messages", "symptoms", "recommendations"}),
}

_BOOL_COLUMNS: Dict[str, frozenset[str]] = {
    "appointments": frozenset({"is_paid"}),
    "medical_documents": frozenset({"is_shared"}),
    "ai_conversations": frozenset({"escalation_flag"}),
}


def format_timestamp(value: datetime | str | None = None) -> str:
    """Render a timestamp as fixed-width UTC text so string order is time order."""
    if value is None:
        dt = datetime.now(timezone.utc)
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        dt = value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _encode(table: str, data: Dict[str, Any]) -> Dict[str, Any]:
    allowed = _COLUMNS[table]
    json_cols = _JSON_COLUMNS.get(table, frozenset())
    bool_cols = _BOOL_COLUMNS.get(table, frozenset())
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in allowed:
            continue
        if key in json_cols:
            out[key] = None if value is None else json.dumps(value, ensure_ascii=False, default=str)
        elif key in bool_cols:
            out[key] = int(bool(value))
        elif isinstance(value, datetime):
            out[key] = format_timestamp(value)
        elif isinstance(value, date):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


def _decode(table: str, row: sqlite3.Row | None) -> Optional[Row]:
    if row is None:
        return None
    data = dict(row)
    for key in _JSON_COLUMNS.get(table, frozenset()):
        raw = data.get(key)
        if isinstance(raw, str):
            data[key] = json.loads(raw)
    for key in _BOOL_COLUMNS.get(table, frozenset()):
        if key in data and data[key] is not None:
            data[key] = bool(data[key])
    return data


def _insert_sql(table: str, values: Dict[str, Any]) -> tuple[str, tuple[Any, ...]]:
    cols = list(values.keys())
    placeholders = ", ".join("?" for _ in cols)
    sql = f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({placeholders})"
    return sql, tuple(values[c] for c in cols)


class EmailTakenError(ValueError):
    """Raised by `create_user` when the email already belongs to an account."""


class Storage(Protocol):
    """Everything the route layer needs from persistence."""

    # Users
    def get_user(self, user_id: str) -> Optional[Row]: ...

    def get_user_by_email(self, email: str) -> Optional[Row]: ...

    def create_user(self, data: Dict[str, Any]) -> Row: ...

    def upsert_user(self, data: Dict[str, Any]) -> Row: ...

    # Profiles
    def get_user_profile(self, user_id: str) -> Optional[Row]: ...

    def upsert_user_profile(self, data: Dict[str, Any]) -> Row: ...

    # Food
    def create_food_entry(self, data: Dict[str, Any]) -> Row: ...

    def get_food_entry(self, entry_id: int, user_id: str) -> Optional[Row]: ...

    def get_food_entries(self, user_id: str, limit: Optional[int] = DEFAULT_FOOD_ENTRY_LIMIT) -> List[Row]: ...

    def get_food_entries_by_date_range(self, user_id: str, start: datetime, end: datetime) -> List[Row]: ...

    def create_food_reaction(self, data: Dict[str, Any]) -> Row: ...

    def get_food_reactions(self, user_id: str, limit: Optional[int] = DEFAULT_REACTION_LIMIT) -> List[Row]: ...

    # HRV
    def create_hrv_data(self, data: Dict[str, Any]) -> Row: ...

    def get_hrv_data(self, user_id: str, limit: Optional[int] = DEFAULT_HRV_LIMIT) -> List[Row]: ...

    # Appointments
    def create_appointment(self, data: Dict[str, Any]) -> Row: ...

    def get_appointments(self, user_id: str) -> List[Row]: ...

    def update_appointment_status(self, appointment_id: int, status: str, user_id: Optional[str] = None) -> bool: ...

    # Medical documents
    def create_medical_document(self, data: Dict[str, Any]) -> Row: ...

    def get_medical_documents(self, user_id: str) -> List[Row]: ...

    # AI conversations
    def create_ai_conversation(self, data: Dict[str, Any]) -> Row: ...

    def get_ai_conversations(self, user_id: str) -> List[Row]: ...

    def update_ai_conversation(self, conversation_id: int, user_id: str, fields: Dict[str, Any]) -> Optional[Row]: ...


class SQLiteStorage:
    """`Storage` backed by a single SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def init_schema(self) -> None:
        init_app_db(self.db_path)

    # ---- helpers ----

    def _insert(self, table: str, values: Dict[str, Any]) -> Row:
        sql, params = _insert_sql(table, values)
        with db_conn(self.db_path) as conn:
            cur = conn.execute(sql, params)
            row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (cur.lastrowid,)).fetchone()
        decoded = _decode(table, row)
        assert decoded is not None
        return decoded

    def _select_many(self, table: str, sql: str, params: tuple[Any, ...]) -> List[Row]:
        with db_conn(self.db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [r for r in (_decode(table, row) for row in rows) if r is not None]

    def _select_one(self, table: str, sql: str, params: tuple[Any, ...]) -> Optional[Row]:
        with db_conn(self.db_path) as conn:
            row = conn.execute(sql, params).fetchone()
        return _decode(table, row)

    # ---- users ----

    def get_user(self, user_id: str) -> Optional[Row]:
        return self._select_one("users", "SELECT * FROM users WHERE id = ?", (user_id,))

    def get_user_by_email(self, email: str) -> Optional[Row]:
        return self._select_one("users", "SELECT * FROM users WHERE email = ?", (email.lower().strip(),))

    def create_user(self, data: Dict[str, Any]) -> Row:
        now = format_timestamp()
        values = _encode("users", data)
        values["email"] = str(values["email"]).lower().strip()
        values["id"] = str(uuid4())
        values["created_at"] = now
        values["updated_at"] = now
        sql, params = _insert_sql("users", values)
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(sql, params)
                row = conn.execute("SELECT * FROM users WHERE id = ?", (values["id"],)).fetchone()
        except sqlite3.IntegrityError as exc:
            if "users.email" in str(exc):
                raise EmailTakenError(values["email"]) from exc
            raise
        decoded = _decode("users", row)
        assert decoded is not None
        return decoded

    def upsert_user(self, data: Dict[str, Any]) -> Row:
        now = format_timestamp()
        values = _encode("users", data)
        values["email"] = str(values["email"]).lower().strip()
        values.setdefault("id", str(uuid4()))
        values["created_at"] = now
        values["updated_at"] = now
        sql, params = _insert_sql("users", values)
        updates = [f"{c} = excluded.{c}" for c in values if c not in {"id", "email", "created_at"}]
        sql += f" ON CONFLICT(email) DO UPDATE SET {', '.join(updates)}"
        with db_conn(self.db_path) as conn:
            conn.execute(sql, params)
            row = conn.execute("SELECT * FROM users WHERE email = ?", (values["email"],)).fetchone()
        decoded = _decode("users", row)
        assert decoded is not None
        return decoded

    # ---- profiles ----

    def get_user_profile(self, user_id: str) -> Optional[Row]:
        return self._select_one("user_profiles", "SELECT * FROM user_profiles WHERE user_id = ?", (user_id,))

    def upsert_user_profile(self, data: Dict[str, Any]) -> Row:
        now = format_timestamp()
        values = _encode("user_profiles", data)
        values["created_at"] = now
        values["updated_at"] = now
        sql, params = _insert_sql("user_profiles", values)
        updates = [f"{c} = excluded.{c}" for c in values if c not in {"user_id", "created_at"}]
        sql += f" ON CONFLICT(user_id) DO UPDATE SET {', '.join(updates)}"
        with db_conn(self.db_path) as conn:
            conn.execute(sql, params)
            row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (values["user_id"],)).fetchone()
        decoded = _decode("user_profiles", row)
        assert decoded is not None
        return decoded

    # ---- food ----

    def create_food_entry(self, data: Dict[str, Any]) -> Row:
        values = _encode("food_entries", data)
        values["timestamp"] = values.get("timestamp") or format_timestamp()
        return self._insert("food_entries", values)

    def get_food_entry(self, entry_id: int, user_id: str) -> Optional[Row]:
        return self._select_one(
            "food_entries",
            "SELECT * FROM food_entries WHERE id = ? AND user_id = ?",
            (int(entry_id), user_id),
        )

    def get_food_entries(self, user_id: str, limit: Optional[int] = DEFAULT_FOOD_ENTRY_LIMIT) -> List[Row]:
        return self._select_many(
            "food_entries",
            "SELECT * FROM food_entries WHERE user_id = ? ORDER BY timestamp DESC, id DESC LIMIT ?",
            (user_id, int(limit or DEFAULT_FOOD_ENTRY_LIMIT)),
        )

    def get_food_entries_by_date_range(self, user_id: str, start: datetime, end: datetime) -> List[Row]:
        return self._select_many(
            "food_entries",
            """
            SELECT * FROM food_entries
            WHERE user_id = ? AND timestamp >= ? AND timestamp <= ?
            ORDER BY timestamp DESC, id DESC
            """,
            (user_id, format_timestamp(start), format_timestamp(end)),
        )

    def create_food_reaction(self, data: Dict[str, Any]) -> Row:
        values = _encode("food_reactions", data)
        values["timestamp"] = values.get("timestamp") or format_timestamp()
        return self._insert("food_reactions", values)

    def get_food_reactions(self, user_id: str, limit: Optional[int] = DEFAULT_REACTION_LIMIT) -> List[Row]:
        return self._select_many(
            "food_reactions",
            "SELECT * FROM food_reactions WHERE user_id = ? ORDER BY timestamp DESC, id DESC LIMIT ?",
            (user_id, int(limit or DEFAULT_REACTION_LIMIT)),
        )

    # ---- hrv ----

    def create_hrv_data(self, data: Dict[str, Any]) -> Row:
        values = _encode("hrv_data", data)
        values["timestamp"] = values.get("timestamp") or format_timestamp()
        return self._insert("hrv_data", values)

    def get_hrv_data(self, user_id: str, limit: Optional[int] = DEFAULT_HRV_LIMIT) -> List[Row]:
        return self._select_many(
            "hrv_data",
            "SELECT * FROM hrv_data WHERE user_id = ? ORDER BY timestamp DESC, id DESC LIMIT ?",
            (user_id, int(limit or DEFAULT_HRV_LIMIT)),
        )

    # ---- appointments ----

    def create_appointment(self, data: Dict[str, Any]) -> Row:
        now = format_timestamp()
        values = _encode("appointments", data)
        values["created_at"] = now
        values["updated_at"] = now
        return self._insert("appointments", values)

    def get_appointments(self, user_id: str) -> List[Row]:
        return self._select_many(
            "appointments",
            "SELECT * FROM appointments WHERE patient_id = ? ORDER BY appointment_date DESC, id DESC",
            (user_id,),
        )

    def update_appointment_status(self, appointment_id: int, status: str, user_id: Optional[str] = None) -> bool:
        sql = "UPDATE appointments SET status = ?, updated_at = ? WHERE id = ?"
        params: list[Any] = [status, format_timestamp(), int(appointment_id)]
        if user_id is not None:
            sql += " AND (patient_id = ? OR doctor_id = ?)"
            params.extend([user_id, user_id])
        with db_conn(self.db_path) as conn:
            cur = conn.execute(sql, tuple(params))
            return cur.rowcount > 0

    # ---- medical documents ----

    def create_medical_document(self, data: Dict[str, Any]) -> Row:
        values = _encode("medical_documents", data)
        values["upload_date"] = format_timestamp()
        return self._insert("medical_documents", values)

    def get_medical_documents(self, user_id: str) -> List[Row]:
        return self._select_many(
            "medical_documents",
            "SELECT * FROM medical_documents WHERE user_id = ? ORDER BY upload_date DESC, id DESC",
            (user_id,),
        )

    # ---- ai conversations ----

    def create_ai_conversation(self, data: Dict[str, Any]) -> Row:
        now = format_timestamp()
        values = _encode("ai_conversations", data)
        values["session_id"] = values.get("session_id") or str(uuid4())
        values["created_at"] = now
        values["updated_at"] = now
        return self._insert("ai_conversations", values)

    def get_ai_conversations(self, user_id: str) -> List[Row]:
        return self._select_many(
            "ai_conversations",
            "SELECT * FROM ai_conversations WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (user_id,),
        )

    def update_ai_conversation(self, conversation_id: int, user_id: str, fields: Dict[str, Any]) -> Optional[Row]:
        values = _encode("ai_conversations", fields)
        for key in ("user_id", "session_id", "created_at"):
            values.pop(key, None)
        values["updated_at"] = format_timestamp()
        assignments = ", ".join(f"{c} = ?" for c in values)
        params = (*values.values(), int(conversation_id), user_id)
        with db_conn(self.db_path) as conn:
            cur = conn.execute(
                f"UPDATE ai_conversations SET {assignments} WHERE id = ? AND user_id = ?",
                params,
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM ai_conversations WHERE id = ?", (int(conversation_id),)).fetchone()
        return _decode("ai_conversations", row)
