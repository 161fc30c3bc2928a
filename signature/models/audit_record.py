# signature/models/audit_record.py
"""Audit ledger entry for one signing run.

The record links the hash of the untouched source document to the hash of the
produced document and to the (redacted) field list that turned one into the
other. `metadata` is never passed in: it is derived from `fields` once, when
the record is constructed.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from core.helpers.date_time_helper import to_utc_iso, utc_now
from .field import Field, FieldType


@dataclass(frozen=True)
class AuditMetadata:
    total_fields: int = 0
    has_signature: bool = False
    page_count: int = 1

    @classmethod
    def derive(cls, fields: Sequence[Field]) -> "AuditMetadata":
        return cls(
            total_fields=len(fields),
            has_signature=any(f.type == FieldType.SIGNATURE for f in fields),
            page_count=max([f.coordinates.page for f in fields] + [1]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFields": self.total_fields,
            "hasSignature": self.has_signature,
            "pageCount": self.page_count,
        }


@dataclass(frozen=True)
class AuditRecord:
    pdf_id: str
    original_hash: str
    signed_hash: str
    fields: Tuple[Field, ...]
    timestamp: datetime = field(default_factory=utc_now)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    id: Optional[str] = None
    metadata: AuditMetadata = field(init=False)

    def __post_init__(self) -> None:
        redacted = tuple(f.redacted() for f in self.fields)
        object.__setattr__(self, "fields", redacted)
        object.__setattr__(self, "metadata", AuditMetadata.derive(redacted))

    @classmethod
    def create(
        cls,
        *,
        pdf_id: str,
        original_hash: str,
        signed_hash: str,
        fields: Sequence[Field],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> "AuditRecord":
        return cls(
            pdf_id=pdf_id,
            original_hash=original_hash,
            signed_hash=signed_hash,
            fields=tuple(fields),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    def with_id(self, audit_id: str) -> "AuditRecord":
        return replace(self, id=audit_id)

    def verify_integrity(self) -> bool:
        """True when the signing run actually changed the document."""
        return self.original_hash != self.signed_hash

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pdfId": self.pdf_id,
            "originalHash": self.original_hash,
            "signedHash": self.signed_hash,
            "fields": [f.to_dict() for f in self.fields],
            "timestamp": to_utc_iso(self.timestamp),
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "metadata": self.metadata.to_dict(),
        }
