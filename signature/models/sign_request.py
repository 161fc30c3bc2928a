# signature/models/sign_request.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .field import Field


@dataclass(frozen=True)
class SignRequest:
    """Validated sign operation input (see `signature.logic.coordinate_validator`)."""
    pdf_id: str
    fields: Tuple[Field, ...]
    signature_image: Optional[str] = None


@dataclass(frozen=True)
class SignResult:
    original_hash: str
    signed_hash: str
    audit_id: str
    filename: str
    signed_pdf_url: str
    download_url: str
    message: str = "PDF signed successfully"

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "signedPdfUrl": self.signed_pdf_url,
            "originalHash": self.original_hash,
            "signedHash": self.signed_hash,
            "auditId": self.audit_id,
            "downloadUrl": self.download_url,
        }

