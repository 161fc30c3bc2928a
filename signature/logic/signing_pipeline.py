# signature/logic/signing_pipeline.py
"""
Field injection pipeline.

load request → validate all fields → read base document → hash →
render fields → serialize → hash → persist + publish → audit record → result

Every run works on its own in-memory copy of the base document; the only
shared mutable resource is the audit ledger.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from core.contracts.audit import IAuditStore
from core.logging.logic.logger import EventLogger
from ..adapters.storage_adapter import SignedPdfStorage, SourceDocument
from ..exceptions.errors import InvalidRequestError, SigningFailedError, SourceDocumentNotFoundError
from ..models.audit_record import AuditRecord
from ..models.sign_request import SignResult
from .coordinate_validator import parse_sign_request
from .hashing import ContentHasher
from .naming_strategy import NamingStrategy, TimestampNamingStrategy
from .pdf_signer import PdfSigner

logger = logging.getLogger(__name__)

_FEATURE_ID = "signature"


class SigningPipeline:
    """Signs the injected base document with the fields of one request."""

    def __init__(
        self,
        *,
        source: SourceDocument,
        storage: SignedPdfStorage,
        audit_store: IAuditStore,
        signer: Optional[PdfSigner] = None,
        hasher: Optional[ContentHasher] = None,
        naming: Optional[NamingStrategy] = None,
        event_log: Optional[EventLogger] = None,
        public_url_prefix: str = "/pdfs",
        download_url_prefix: str = "/api/download",
    ) -> None:
        self._source = source
        self._storage = storage
        self._audits = audit_store
        self._signer = signer or PdfSigner()
        self._hasher = hasher or ContentHasher()
        self._naming = naming or TimestampNamingStrategy()
        self._events = event_log
        self._public_prefix = public_url_prefix.rstrip("/")
        self._download_prefix = download_url_prefix.rstrip("/")

    def sign(self, payload: Any, *, ip_address: Optional[str] = None,
             user_agent: Optional[str] = None) -> SignResult:
        """
        Runs one signing request to completion.

        Raises:
            InvalidRequestError: malformed request, nothing was read
            SourceDocumentNotFoundError: base document missing
            SigningFailedError: any other failure
        """
        request = parse_sign_request(payload)

        try:
            original = self._source.read_bytes()
            original_hash = self._hasher.hexdigest(original)
            logger.info("Original PDF hash: %s", original_hash)

            report = self._signer.apply_fields(
                original, request.fields, signature_image=request.signature_image
            )
            signed_hash = self._hasher.hexdigest(report.data)
            logger.info("Signed PDF hash: %s", signed_hash)

            filename = self._naming.next_name()
            self._storage.save_signed_pdf(filename=filename, data=report.data)
            try:
                self._storage.publish(filename=filename)
                audit = self._audits.save(AuditRecord.create(
                    pdf_id=request.pdf_id,
                    original_hash=original_hash,
                    signed_hash=signed_hash,
                    fields=request.fields,
                    ip_address=ip_address,
                    user_agent=user_agent,
                ))
            except Exception:
                self._storage.discard(filename=filename)
                raise
        except (InvalidRequestError, SourceDocumentNotFoundError):
            raise
        except Exception as exc:
            logger.exception("Error while signing pdf %s", request.pdf_id)
            self._log_event("sign_failed", level="ERROR", reference_id=request.pdf_id,
                            message=str(exc))
            raise SigningFailedError(str(exc)) from exc

        self._log_event(
            "pdf_signed",
            reference_id=audit.id,
            message=f"pdf_id={request.pdf_id} file={filename} fields={audit.metadata.total_fields}",
        )
        return SignResult(
            original_hash=original_hash,
            signed_hash=signed_hash,
            audit_id=str(audit.id),
            filename=filename,
            signed_pdf_url=f"{self._public_prefix}/{filename}",
            download_url=f"{self._download_prefix}/{filename}",
        )

    def _log_event(self, event: str, *, level: str = "INFO",
                   reference_id: Optional[str] = None, message: Optional[str] = None) -> None:
        if self._events is None:
            return
        try:
            self._events.log(_FEATURE_ID, event, level=level,
                             reference_id=reference_id, message=message)
        except Exception:  # pragma: no cover
            logger.exception("Could not write %s event to event log", event)
