"""SQLite implementation of the audit ledger.

Lightweight repository - append and query only. Records are never updated
after insertion; metadata is derived from the field list right before the
insert.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, List, Optional
from uuid import uuid4

from core.contracts.audit import IAuditStore
from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso, utc_now_iso
from ..models.audit_record import AuditRecord
from ..models.field import Field

logger = logging.getLogger(__name__)


class AuditRepository(IAuditStore):
    """SQLite backend for signing audit records."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._ensure_schema()

    # =========================================================================
    # Connection / Schema
    # =========================================================================

    @property
    def conn(self) -> sqlite3.Connection:
        """Shared connection, created on first use."""
        if self._conn is None:
            if str(self._db_path) != ":memory:":
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self) -> None:
        """Close the current connection if present and clear the handle."""
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None

    def _ensure_schema(self) -> None:
        with self._lock:
            self.conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS audits (
                    id TEXT PRIMARY KEY,
                    pdf_id TEXT NOT NULL,
                    original_hash TEXT NOT NULL,
                    signed_hash TEXT NOT NULL,
                    fields TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    ip_address TEXT,
                    user_agent TEXT,
                    total_fields INTEGER NOT NULL DEFAULT 0,
                    has_signature INTEGER NOT NULL DEFAULT 0,
                    page_count INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS ix_audits_pdf_id ON audits(pdf_id);
                CREATE INDEX IF NOT EXISTS ix_audits_original_hash ON audits(original_hash);
                CREATE INDEX IF NOT EXISTS ix_audits_signed_hash ON audits(signed_hash);
                CREATE INDEX IF NOT EXISTS ix_audits_timestamp ON audits(timestamp);
                CREATE INDEX IF NOT EXISTS ix_audits_pdf_id_ts ON audits(pdf_id, timestamp DESC);
                CREATE INDEX IF NOT EXISTS ix_audits_hash_pair ON audits(original_hash, signed_hash);
                """
            )
            self.conn.commit()

    # =========================================================================
    # Writes
    # =========================================================================

    def save(self, record: AuditRecord) -> AuditRecord:
        # Rebuilding the record re-derives metadata from the (redacted) fields.
        stored = AuditRecord(
            pdf_id=record.pdf_id,
            original_hash=record.original_hash,
            signed_hash=record.signed_hash,
            fields=record.fields,
            timestamp=record.timestamp,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
            id=record.id or uuid4().hex,
        )
        meta = stored.metadata
        now = utc_now_iso()
        with self._lock:
            self.conn.execute(
                """
                INSERT INTO audits
                    (id, pdf_id, original_hash, signed_hash, fields, timestamp,
                     ip_address, user_agent, total_fields, has_signature, page_count,
                     created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.pdf_id,
                    stored.original_hash,
                    stored.signed_hash,
                    json.dumps([f.to_dict() for f in stored.fields], ensure_ascii=False),
                    to_utc_iso(stored.timestamp),
                    stored.ip_address,
                    stored.user_agent,
                    meta.total_fields,
                    int(meta.has_signature),
                    meta.page_count,
                    now,
                    now,
                ),
            )
            self.conn.commit()
        logger.debug("Audit record %s saved for pdf %s", stored.id, stored.pdf_id)
        return stored

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_id(self, audit_id: str) -> Optional[AuditRecord]:
        rows = self._select("WHERE id = ?", (audit_id,))
        return rows[0] if rows else None

    def find_recent(self, limit: int = 50) -> List[AuditRecord]:
        return self._select("ORDER BY timestamp DESC, rowid DESC LIMIT ?", (limit,))

    def find_by_hash(self, digest: str) -> List[AuditRecord]:
        return self._select(
            "WHERE original_hash = ? OR signed_hash = ? ORDER BY timestamp DESC, rowid DESC",
            (digest, digest),
        )

    def find_by_pdf_id(self, pdf_id: str) -> List[AuditRecord]:
        return self._select("WHERE pdf_id = ? ORDER BY timestamp DESC, rowid DESC", (pdf_id,))

    def count(self) -> int:
        with self._lock:
            return int(self.conn.execute("SELECT COUNT(*) FROM audits").fetchone()[0])

    # =========================================================================
    # Helpers
    # =========================================================================

    def _select(self, clause: str, params: tuple) -> List[AuditRecord]:
        with self._lock:
            rows = self.conn.execute(f"SELECT * FROM audits {clause}", params).fetchall()
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> AuditRecord:
        raw_fields: List[Any] = json.loads(row["fields"])
        return AuditRecord(
            pdf_id=row["pdf_id"],
            original_hash=row["original_hash"],
            signed_hash=row["signed_hash"],
            fields=tuple(Field.from_dict(f) for f in raw_fields),
            timestamp=parse_utc_iso(row["timestamp"]),
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            id=row["id"],
        )
