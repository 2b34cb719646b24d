"""
SQLite-based staff account store for dashboard login.
Stores users with bcrypt-hashed passwords.
"""
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pathlib import Path

import bcrypt as _bcrypt


def _hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode("utf-8"), _bcrypt.gensalt()).decode("utf-8")


class UserDB:
    """SQLite user database for dashboard authentication."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Get a new connection (sqlite3 connections are not thread-safe)."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self):
        """Create the users table if it doesn't exist."""
        conn = self._get_conn()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS staff_users (
                    id TEXT PRIMARY KEY,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    full_name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    is_active INTEGER DEFAULT 1
                )
            """)
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> Dict[str, Any]:
        return {
            "id": row["id"],
            "email": row["email"],
            "full_name": row["full_name"],
            "created_at": row["created_at"],
        }

    def create_user(self, email: str, password: str, full_name: str) -> Optional[Dict[str, Any]]:
        """
        Register a new staff user.

        Returns:
            User dict if created, None if email already exists.
        """
        conn = self._get_conn()
        try:
            now = datetime.now(timezone.utc).isoformat()
            user_id = str(uuid.uuid4())
            conn.execute(
                """INSERT INTO staff_users (id, email, password_hash, full_name, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (user_id, email.lower().strip(), _hash_password(password), full_name.strip(), now, now)
            )
            conn.commit()
            return {
                "id": user_id,
                "email": email.lower().strip(),
                "full_name": full_name.strip(),
                "created_at": now,
            }
        except sqlite3.IntegrityError:
            # Email already exists
            return None
        finally:
            conn.close()

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Verify email + password.

        Returns:
            User dict if credentials are valid, None otherwise.
        """
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM staff_users WHERE email = ? AND is_active = 1",
                (email.lower().strip(),)
            ).fetchone()

            if not row:
                return None

            if not _bcrypt.checkpw(password.encode("utf-8"), row["password_hash"].encode("utf-8")):
                return None

            return self._row_to_user(row)
        finally:
            conn.close()

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Look up a user by ID."""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM staff_users WHERE id = ? AND is_active = 1",
                (user_id,)
            ).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Look up a user by email."""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM staff_users WHERE email = ? AND is_active = 1",
                (email.lower().strip(),)
            ).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def update_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        """
        Change a user's password after checking the current one.

        Returns:
            True if updated, False if the user is unknown or the current password is wrong.
        """
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT password_hash FROM staff_users WHERE id = ? AND is_active = 1",
                (user_id,)
            ).fetchone()
            if not row:
                return False
            if not _bcrypt.checkpw(current_password.encode("utf-8"), row["password_hash"].encode("utf-8")):
                return False

            conn.execute(
                "UPDATE staff_users SET password_hash = ?, updated_at = ? WHERE id = ?",
                (_hash_password(new_password), datetime.now(timezone.utc).isoformat(), user_id)
            )
            conn.commit()
            return True
        finally:
            conn.close()
