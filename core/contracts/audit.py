"""core/contracts/audit.py
======================

Audit ledger contract.

The signing pipeline treats the ledger as its only record of signing history.
This interface keeps the storage engine replaceable (SQLite, in-memory, remote)
while keeping a single place where the ledger semantics are defined.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from signature.models.audit_record import AuditRecord


class IAuditStore(ABC):
    """Append-only ledger of signing events."""

    @abstractmethod
    def save(self, record: "AuditRecord") -> "AuditRecord":
        """Persist *record* and return it carrying its assigned identifier."""

    @abstractmethod
    def find_by_id(self, audit_id: str) -> Optional["AuditRecord"]:
        """Return the record with *audit_id* or ``None``."""

    @abstractmethod
    def find_recent(self, limit: int = 50) -> List["AuditRecord"]:
        """Return at most *limit* records, most recent first."""

    @abstractmethod
    def find_by_hash(self, digest: str) -> List["AuditRecord"]:
        """Records whose original or signed hash equals *digest*, most recent first."""

    @abstractmethod
    def find_by_pdf_id(self, pdf_id: str) -> List["AuditRecord"]:
        """Records for one logical document, most recent first."""
