"""SQLite storage adapter.

Implements the core SubscriptionRegistryPort using a simple SQLite database.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid

from core.models import Subscription, UserRecord

LOGGER = logging.getLogger(__name__)


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the SubscriptionRegistryPort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - users: chats known to the bot and their auth status
        - subscriptions: which chat watches which printer
        """

        with self._connect() as conn:
            # users keeps one row per chat. The auth columns are written by the
            # bot front-end; the watcher only reads them for listings.
            # Fields:
            # - id: random row id
            # - chat_id: Telegram chat id (UNIQUE)
            # - auth_code / auth_code_valid_until: pending login code
            # - authed / banned: access flags
            # - invalid_auth_attempts: failed login counter
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT NOT NULL,
                    chat_id TEXT NOT NULL UNIQUE,
                    auth_code TEXT,
                    auth_code_valid_until TEXT,
                    authed BOOLEAN DEFAULT 0,
                    invalid_auth_attempts INTEGER DEFAULT 0,
                    banned BOOLEAN DEFAULT 0
                )
                """
            )
            # subscriptions is unique per (chat_id, printer_id).
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS subscriptions (
                    id TEXT NOT NULL,
                    chat_id TEXT NOT NULL,
                    printer_id TEXT NOT NULL,
                    PRIMARY KEY (chat_id, printer_id),
                    FOREIGN KEY (chat_id) REFERENCES users (chat_id)
                )
                """
            )

    def list_users(self) -> list[UserRecord]:
        with self._connect() as conn:
            rows = conn.execute("SELECT chat_id, authed, banned FROM users").fetchall()
        return [
            UserRecord(chat_id=row["chat_id"], authed=bool(row["authed"]), banned=bool(row["banned"]))
            for row in rows
        ]

    def delete_user(self, chat_id: str) -> bool:
        """Delete a chat and its subscriptions. Returns True if the chat existed."""

        with self._connect() as conn:
            conn.execute("DELETE FROM subscriptions WHERE chat_id = ?", (str(chat_id),))
            cur = conn.execute("DELETE FROM users WHERE chat_id = ?", (str(chat_id),))
            return cur.rowcount > 0

    def subscribe(self, chat_id: str, printer_id: str) -> None:
        """Subscribe a chat to a printer; repeated calls are no-ops."""

        LOGGER.info("Subscribing %s to printer %s", chat_id, printer_id)
        with self._connect() as conn:
            # The foreign key requires the chat to exist.
            conn.execute(
                """
                INSERT INTO users (id, chat_id) VALUES (?, ?)
                ON CONFLICT DO NOTHING
                """,
                (str(uuid.uuid4()), str(chat_id)),
            )
            conn.execute(
                """
                INSERT INTO subscriptions (id, chat_id, printer_id)
                VALUES (?, ?, ?)
                ON CONFLICT DO NOTHING
                """,
                (str(uuid.uuid4()), str(chat_id), printer_id),
            )

    def unsubscribe(self, chat_id: str, printer_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM subscriptions WHERE chat_id = ? AND printer_id = ?",
                (str(chat_id), printer_id),
            )

    def list_subscriptions(self) -> list[Subscription]:
        with self._connect() as conn:
            rows = conn.execute("SELECT chat_id, printer_id FROM subscriptions").fetchall()
        return [Subscription(chat_id=row["chat_id"], printer_id=row["printer_id"]) for row in rows]
