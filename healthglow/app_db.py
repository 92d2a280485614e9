# -*- coding: utf-8 -*-
"""App database — SQLite helpers and schema."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

USER_TYPES = ("patient", "doctor", "admin")
APPOINTMENT_STATUSES = ("scheduled", "completed", "cancelled", "rescheduled")
REACTION_SEVERITIES = ("mild", "moderate", "severe")
ACCESS_LEVELS = ("read", "write", "full")


def _in(values: tuple[str, ...]) -> str:
    return ", ".join(f"'{v}'" for v in values)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT,
                first_name TEXT,
                last_name TEXT,
                profile_image_url TEXT,
                user_type TEXT NOT NULL DEFAULT 'patient' CHECK (user_type IN ({_in(USER_TYPES)})),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS user_profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL UNIQUE,
                age INTEGER,
                weight REAL,
                height REAL,
                sex TEXT,
                blood_type TEXT,
                emergency_contact TEXT,
                medical_conditions TEXT,
                allergies TEXT,
                medications TEXT,
                family_history TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS family_members (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                primary_user_id TEXT NOT NULL,
                dependent_user_id TEXT NOT NULL,
                relationship TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(primary_user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(dependent_user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS hrv_data (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                rmssd REAL,
                pnn50 REAL,
                heart_rate INTEGER,
                stress_level INTEGER,
                source_device TEXT,
                source_api TEXT,
                raw_data TEXT,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_hrv_data_user_ts ON hrv_data(user_id, timestamp DESC);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                meal_type TEXT,
                description TEXT,
                image_url TEXT,
                voice_transcript TEXT,
                ai_analysis TEXT,
                calories INTEGER,
                nutrients TEXT,
                mood_before INTEGER,
                mood_after INTEGER,
                energy_before INTEGER,
                energy_after INTEGER,
                digestion_rating INTEGER,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_food_entries_user_ts ON food_entries(user_id, timestamp DESC);")
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS food_reactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                food_entry_id INTEGER,
                food_item TEXT NOT NULL,
                reaction_type TEXT,
                severity TEXT NOT NULL DEFAULT 'mild' CHECK (severity IN ({_in(REACTION_SEVERITIES)})),
                symptoms TEXT,
                timestamp TEXT NOT NULL,
                notes TEXT,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(food_entry_id) REFERENCES food_entries(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS medical_documents (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                document_type TEXT NOT NULL,
                title TEXT NOT NULL,
                file_url TEXT NOT NULL,
                encrypted_key TEXT,
                upload_date TEXT NOT NULL,
                document_date TEXT,
                doctor_name TEXT,
                facility_name TEXT,
                tags TEXT,
                is_shared INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS document_shares (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                document_id INTEGER NOT NULL,
                shared_by_user_id TEXT NOT NULL,
                shared_with_user_id TEXT NOT NULL,
                access_level TEXT NOT NULL DEFAULT 'read' CHECK (access_level IN ({_in(ACCESS_LEVELS)})),
                expires_at TEXT,
                created_at TEXT NOT NULL,
                accessed_at TEXT,
                FOREIGN KEY(document_id) REFERENCES medical_documents(id) ON DELETE CASCADE,
                FOREIGN KEY(shared_by_user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(shared_with_user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            f"""
            CREATE TABLE IF NOT EXISTS appointments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                patient_id TEXT NOT NULL,
                doctor_id TEXT NOT NULL,
                appointment_date TEXT NOT NULL,
                duration INTEGER NOT NULL DEFAULT 30,
                status TEXT NOT NULL DEFAULT 'scheduled' CHECK (status IN ({_in(APPOINTMENT_STATUSES)})),
                type TEXT,
                notes TEXT,
                video_call_url TEXT,
                price REAL,
                is_paid INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(patient_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(doctor_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_appointments_patient_date ON appointments(patient_id, appointment_date DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS doctor_profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL UNIQUE,
                specialization TEXT,
                license_number TEXT,
                years_experience INTEGER,
                education TEXT,
                certifications TEXT,
                consultation_fee REAL,
                availability TEXT,
                bio TEXT,
                rating REAL,
                review_count INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_conversations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                session_id TEXT NOT NULL,
                messages TEXT NOT NULL,
                symptoms TEXT,
                recommendations TEXT,
                escalation_flag INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_ai_conversations_user_created ON ai_conversations(user_id, created_at DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS notifications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                message TEXT NOT NULL,
                is_read INTEGER NOT NULL DEFAULT 0,
                scheduled_for TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
