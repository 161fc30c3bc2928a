"""Request handlers for the signing feature.

Framework-agnostic: each handler returns an :class:`ApiResponse` (status code +
JSON-serialisable body) or a :class:`FileDownload`, which the hosting web layer
turns into its own response objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from core.contracts.audit import IAuditStore
from core.helpers.date_time_helper import unix_millis
from ..adapters.storage_adapter import SignedPdfStorage
from ..exceptions.errors import InvalidRequestError, SigningFailedError, SourceDocumentNotFoundError
from ..logic.hashing import ContentHasher
from ..logic.signing_pipeline import SigningPipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    status: int
    body: Any


@dataclass(frozen=True)
class FileDownload:
    path: Path
    download_name: str
    media_type: str = "application/pdf"


class SigningController:
    """Handles sign, download and audit query requests."""

    def __init__(
        self,
        *,
        pipeline: SigningPipeline,
        storage: SignedPdfStorage,
        audit_store: IAuditStore,
        hasher: Optional[ContentHasher] = None,
        recent_limit: int = 50,
    ) -> None:
        self._pipeline = pipeline
        self._storage = storage
        self._audits = audit_store
        self._hasher = hasher or ContentHasher()
        self._recent_limit = recent_limit

    # ------------------------------------------------------------------ #
    def sign_pdf(self, payload: Any, *, ip_address: Optional[str] = None,
                 user_agent: Optional[str] = None) -> ApiResponse:
        try:
            result = self._pipeline.sign(payload, ip_address=ip_address, user_agent=user_agent)
        except InvalidRequestError as exc:
            return ApiResponse(400, {"error": str(exc)})
        except SourceDocumentNotFoundError as exc:
            return ApiResponse(404, {"error": str(exc)})
        except SigningFailedError as exc:
            return ApiResponse(500, {"error": "Failed to sign PDF", "details": exc.details})
        return ApiResponse(200, result.to_response())

    def download(self, filename: str) -> Union[FileDownload, ApiResponse]:
        try:
            path = self._storage.resolve(filename)
        except Exception as exc:
            logger.exception("Failed to resolve download %s", filename)
            return ApiResponse(500, {"error": "Failed to download file", "details": str(exc)})
        if path is None:
            return ApiResponse(404, {"error": "File not found"})
        return FileDownload(path=path, download_name=f"signed-document-{unix_millis()}.pdf")

    # ------------------------------------------------------------------ #
    def get_audit(self, audit_id: str) -> ApiResponse:
        try:
            record = self._audits.find_by_id(audit_id)
        except Exception as exc:
            logger.exception("Failed to fetch audit %s", audit_id)
            return ApiResponse(500, {"error": "Failed to fetch audit trail", "details": str(exc)})
        if record is None:
            return ApiResponse(404, {"error": "Audit trail not found"})
        return ApiResponse(200, record.to_dict())

    def list_audits(self) -> ApiResponse:
        try:
            records = self._audits.find_recent(self._recent_limit)
        except Exception as exc:
            logger.exception("Failed to fetch audits")
            return ApiResponse(500, {"error": "Failed to fetch audits", "details": str(exc)})
        return ApiResponse(200, [r.to_dict() for r in records])

    def find_audits_by_hash(self, digest: str) -> ApiResponse:
        try:
            records = self._audits.find_by_hash(digest.strip().lower())
        except Exception as exc:
            logger.exception("Failed to fetch audits for hash %s", digest)
            return ApiResponse(500, {"error": "Failed to fetch audits", "details": str(exc)})
        return ApiResponse(200, [r.to_dict() for r in records])

    def verify_document(self, data: bytes) -> ApiResponse:
        """Hashes an uploaded document and reports the audit records that reference it."""
        digest = self._hasher.hexdigest(data)
        response = self.find_audits_by_hash(digest)
        if response.status != 200:
            return response
        return ApiResponse(200, {"hash": digest, "known": bool(response.body), "audits": response.body})
