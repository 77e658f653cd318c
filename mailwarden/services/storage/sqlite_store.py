"""
MailWarden SQLite Store

Persistent storage for tenants, users, messages and fraud analyses using SQLite.
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
from uuid import UUID

from mailwarden.models.email import Message, Provider, Recipient, Tenant
from mailwarden.models.detection import DetectionSignal, FraudVerdict, RiskLevel
from mailwarden.utils.constants import HIGH_RISK_LEVELS
from mailwarden.utils.exceptions import RecordNotFoundError, StorageError
from mailwarden.utils.helpers import utc_now

from .base import Store

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS tenants (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        provider TEXT NOT NULL CHECK (provider IN ('microsoft', 'google')),
        status TEXT DEFAULT 'active',
        internal_domains TEXT NOT NULL DEFAULT '[]',
        trusted_domains TEXT NOT NULL DEFAULT '[]',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        tenant_id TEXT REFERENCES tenants(id) ON DELETE CASCADE,
        provider_user_id TEXT NOT NULL,
        email TEXT NOT NULL,
        display_name TEXT,
        role TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (tenant_id, provider_user_id)
    );

    CREATE INDEX IF NOT EXISTS idx_users_tenant_email ON users(tenant_id, email);

    CREATE TABLE IF NOT EXISTS messages (
        id TEXT PRIMARY KEY,
        tenant_id TEXT REFERENCES tenants(id) ON DELETE CASCADE,
        user_id TEXT REFERENCES users(id) ON DELETE CASCADE,
        provider_message_id TEXT NOT NULL,
        subject TEXT,
        sender_email TEXT NOT NULL,
        sender_name TEXT,
        recipient_email TEXT NOT NULL,
        received_at TIMESTAMP NOT NULL,
        has_attachments INTEGER DEFAULT 0,
        attachment_names TEXT NOT NULL DEFAULT '[]',
        body_preview TEXT,
        headers TEXT NOT NULL DEFAULT '{}',
        ingested_at TIMESTAMP NOT NULL,
        processed_at TIMESTAMP,
        UNIQUE (tenant_id, provider_message_id)
    );

    CREATE INDEX IF NOT EXISTS idx_messages_received_at ON messages(tenant_id, received_at DESC);
    CREATE INDEX IF NOT EXISTS idx_messages_unprocessed ON messages(processed_at, received_at);

    CREATE TABLE IF NOT EXISTS fraud_analyses (
        id TEXT PRIMARY KEY,
        message_id TEXT REFERENCES messages(id) ON DELETE CASCADE,
        risk_score REAL NOT NULL,
        risk_level TEXT NOT NULL,
        signals TEXT NOT NULL DEFAULT '[]',
        analyzed_at TIMESTAMP NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_fraud_risk ON fraud_analyses(risk_level, analyzed_at DESC);
    CREATE INDEX IF NOT EXISTS idx_fraud_message ON fraud_analyses(message_id);
"""

MESSAGE_COLUMNS = """
    id, tenant_id, user_id, provider_message_id, subject, sender_email,
    sender_name, recipient_email, received_at, has_attachments,
    attachment_names, body_preview, headers, ingested_at, processed_at
"""


def _uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


def _str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _tenant_key(tenant_id: Optional[UUID]) -> str:
    # NULLs never collide in a UNIQUE index; "" stands for "no tenant"
    return str(tenant_id) if tenant_id is not None else ""


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SQLiteStore(Store):
    """
    SQLite-based store.

    Opens one connection per operation, so a single instance may be shared
    between the pipeline and the API.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        try:
            conn.executescript(SCHEMA)
            conn.commit()
            logger.info(f"SQLite database initialized at {self.db_path}")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize database: {e}") from e
        finally:
            conn.close()

    def _execute(self, query: str, params: tuple = ()) -> int:
        """Run a write statement and return the affected row count."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Database write failed: {e}") from e
        finally:
            conn.close()

    def _fetch(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        conn = self._get_connection()
        try:
            return conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Database read failed: {e}") from e
        finally:
            conn.close()

    # =========================================================================
    # Tenants
    # =========================================================================

    async def create_tenant(self, tenant: Tenant) -> bool:
        created = self._execute(
            """
            INSERT OR IGNORE INTO tenants (id, name, provider, status, internal_domains, trusted_domains)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                str(tenant.id),
                tenant.name,
                tenant.provider.value,
                tenant.status,
                json.dumps(tenant.internal_domains),
                json.dumps(tenant.trusted_domains),
            ),
        )
        return created > 0

    async def get_tenant(self, tenant_id: UUID) -> Tenant:
        rows = self._fetch("SELECT * FROM tenants WHERE id = ?", (str(tenant_id),))
        if not rows:
            raise RecordNotFoundError(f"Tenant {tenant_id} not found")
        row = rows[0]
        return Tenant(
            id=UUID(row["id"]),
            name=row["name"],
            provider=Provider(row["provider"]),
            status=row["status"],
            internal_domains=json.loads(row["internal_domains"]),
            trusted_domains=json.loads(row["trusted_domains"]),
        )

    # =========================================================================
    # Users
    # =========================================================================

    async def create_user(self, user: Recipient) -> Recipient:
        self._execute(
            """
            INSERT INTO users (id, tenant_id, provider_user_id, email, display_name, role)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (tenant_id, provider_user_id) DO UPDATE SET
                email = excluded.email,
                display_name = excluded.display_name,
                role = excluded.role
            """,
            (
                str(user.id),
                _tenant_key(user.tenant_id),
                user.provider_user_id,
                user.email,
                user.display_name,
                user.role,
            ),
        )
        rows = self._fetch(
            "SELECT * FROM users WHERE tenant_id = ? AND provider_user_id = ?",
            (_tenant_key(user.tenant_id), user.provider_user_id),
        )
        return self._row_to_user(rows[0])

    async def get_user_by_email(self, tenant_id: UUID, email: str) -> Optional[Recipient]:
        rows = self._fetch(
            "SELECT * FROM users WHERE tenant_id = ? AND lower(email) = lower(?) LIMIT 1",
            (str(tenant_id), email),
        )
        return self._row_to_user(rows[0]) if rows else None

    def _row_to_user(self, row: sqlite3.Row) -> Recipient:
        return Recipient(
            id=UUID(row["id"]),
            tenant_id=_uuid(row["tenant_id"]),
            provider_user_id=row["provider_user_id"],
            email=row["email"],
            display_name=row["display_name"] or "",
            role=row["role"] or "",
        )

    # =========================================================================
    # Messages
    # =========================================================================

    async def create_message(self, message: Message) -> bool:
        created = self._execute(
            f"""
            INSERT INTO messages ({MESSAGE_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (tenant_id, provider_message_id) DO NOTHING
            """,
            (
                str(message.id),
                _tenant_key(message.tenant_id),
                _str(message.user_id),
                message.provider_message_id,
                message.subject,
                message.sender_email,
                message.sender_name,
                message.recipient_email,
                _timestamp(message.received_at),
                int(message.has_attachments),
                json.dumps(list(message.attachment_names)),
                message.body_preview,
                json.dumps(message.headers),
                _timestamp(message.ingested_at or utc_now()),
                _timestamp(message.processed_at),
            ),
        )
        return created > 0

    async def get_message(self, message_id: UUID) -> Message:
        rows = self._fetch(f"SELECT {MESSAGE_COLUMNS} FROM messages WHERE id = ?", (str(message_id),))
        if not rows:
            raise RecordNotFoundError(f"Message {message_id} not found")
        return self._row_to_message(rows[0])

    async def get_unprocessed_messages(self, limit: int, tenant_id: Optional[UUID] = None) -> List[Message]:
        query = f"SELECT {MESSAGE_COLUMNS} FROM messages WHERE processed_at IS NULL"
        params: tuple = ()
        if tenant_id is not None:
            query += " AND tenant_id = ?"
            params = (str(tenant_id),)
        query += " ORDER BY received_at ASC LIMIT ?"
        rows = self._fetch(query, params + (limit,))
        return [self._row_to_message(row) for row in rows]

    async def mark_message_processed(self, message_id: UUID) -> None:
        updated = self._execute(
            "UPDATE messages SET processed_at = ? WHERE id = ?",
            (_timestamp(utc_now()), str(message_id)),
        )
        if updated == 0:
            raise RecordNotFoundError(f"Message {message_id} not found")

    def _row_to_message(self, row: sqlite3.Row) -> Message:
        return Message(
            id=UUID(row["id"]),
            tenant_id=_uuid(row["tenant_id"]),
            user_id=_uuid(row["user_id"]),
            provider_message_id=row["provider_message_id"],
            subject=row["subject"] or "",
            sender_email=row["sender_email"],
            sender_name=row["sender_name"] or "",
            recipient_email=row["recipient_email"],
            received_at=_datetime(row["received_at"]),
            has_attachments=bool(row["has_attachments"]),
            attachment_names=tuple(json.loads(row["attachment_names"])),
            body_preview=row["body_preview"] or "",
            headers=json.loads(row["headers"]),
            ingested_at=_datetime(row["ingested_at"]),
            processed_at=_datetime(row["processed_at"]),
        )

    # =========================================================================
    # Analyses
    # =========================================================================

    async def create_analysis(self, verdict: FraudVerdict) -> None:
        signals = json.dumps([signal.model_dump(mode="json") for signal in verdict.signals])
        self._execute(
            """
            INSERT INTO fraud_analyses (id, message_id, risk_score, risk_level, signals, analyzed_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                str(verdict.id),
                _str(verdict.message_id),
                verdict.risk_score,
                verdict.risk_level.value,
                signals,
                _timestamp(verdict.analyzed_at),
            ),
        )
        logger.info(f"Saved analysis {verdict.id} for message {verdict.message_id}")

    async def get_high_risk_analyses(self, tenant_id: UUID, limit: int) -> List[FraudVerdict]:
        placeholders = ", ".join("?" for _ in HIGH_RISK_LEVELS)
        rows = self._fetch(
            f"""
            SELECT fa.id, fa.message_id, fa.risk_score, fa.risk_level, fa.signals, fa.analyzed_at
            FROM fraud_analyses fa
            JOIN messages m ON fa.message_id = m.id
            WHERE m.tenant_id = ? AND fa.risk_level IN ({placeholders})
            ORDER BY fa.risk_score DESC, fa.analyzed_at DESC
            LIMIT ?
            """,
            (str(tenant_id), *HIGH_RISK_LEVELS, limit),
        )
        return [
            FraudVerdict(
                id=UUID(row["id"]),
                message_id=_uuid(row["message_id"]),
                risk_score=row["risk_score"],
                risk_level=RiskLevel(row["risk_level"]),
                signals=[DetectionSignal(**item) for item in json.loads(row["signals"])],
                analyzed_at=_datetime(row["analyzed_at"]),
            )
            for row in rows
        ]

    async def close(self) -> None:
        logger.debug(f"SQLite store at {self.db_path} closed")


_sqlite_store: Optional[SQLiteStore] = None


def get_sqlite_store(db_path: Optional[Union[str, Path]] = None) -> SQLiteStore:
    """Get the SQLite store singleton, created on first use."""
    global _sqlite_store
    if _sqlite_store is None:
        if db_path is None:
            from mailwarden.config import get_settings
            db_path = get_settings().database_path
        _sqlite_store = SQLiteStore(db_path)
    return _sqlite_store
