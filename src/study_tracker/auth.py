"""Local account sign-up and login.

Accounts live in the same SQLite database as the syllabus data. The rest of
the tracker only ever sees the resulting Identity, whose key selects the
storage partition.
"""
import hashlib
import hmac
import logging
import secrets
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from study_tracker.db import DEFAULT_DB_PATH, delete_setting, get_connection, get_setting, set_setting

logger = logging.getLogger(__name__)

SESSION_KEY = "session_email"
PBKDF2_ITERATIONS = 200_000


@dataclass(frozen=True)
class Identity:
    key: str
    name: str = ""


@dataclass
class AuthResult:
    success: bool
    message: str
    identity: Optional[Identity] = None


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex()


class IdentityProvider:
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    def sign_up(self, name: str, email: str, password: str) -> AuthResult:
        name, email = name.strip(), email.strip()
        if not name or not email or not password:
            return AuthResult(False, "Name, email and password are required.")
        salt = secrets.token_hex(16)
        try:
            conn = get_connection(self.db_path)
            try:
                if conn.execute("SELECT 1 FROM users WHERE email = ?", (email,)).fetchone():
                    return AuthResult(False, "An account with this email already exists.")
                conn.execute(
                    "INSERT INTO users (email, name, password_hash, salt, created_at) VALUES (?, ?, ?, ?, ?)",
                    (email, name, _hash_password(password, salt), salt, datetime.now().isoformat()),
                )
                conn.commit()
            finally:
                conn.close()
            set_setting(self.db_path, SESSION_KEY, email)
        except sqlite3.Error as e:
            logger.error(f"Sign up failed for {email}: {e}")
            return AuthResult(False, "An error occurred during sign up.")
        return AuthResult(True, "Sign up successful!", Identity(key=email, name=name))

    def login(self, email: str, password: str) -> AuthResult:
        email = email.strip()
        try:
            conn = get_connection(self.db_path)
            try:
                user = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            finally:
                conn.close()
            if user is None or not hmac.compare_digest(
                user["password_hash"], _hash_password(password, user["salt"])
            ):
                return AuthResult(False, "Invalid email or password.")
            set_setting(self.db_path, SESSION_KEY, email)
        except sqlite3.Error as e:
            logger.error(f"Login failed for {email}: {e}")
            return AuthResult(False, "An error occurred during login.")
        return AuthResult(True, "Login successful!", Identity(key=user["email"], name=user["name"]))

    def logout(self) -> AuthResult:
        try:
            delete_setting(self.db_path, SESSION_KEY)
        except sqlite3.Error as e:
            logger.error(f"Failed to clear session: {e}")
        return AuthResult(True, "Logged out.")

    def current_identity(self) -> Identity | None:
        """Identity of the session left open by a previous run, if any."""
        try:
            email = get_setting(self.db_path, SESSION_KEY)
            if email is None:
                return None
            conn = get_connection(self.db_path)
            try:
                user = conn.execute("SELECT email, name FROM users WHERE email = ?", (email,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not restore session: {e}")
            return None
        return Identity(key=user["email"], name=user["name"]) if user else None
