# signature/bootstrap.py
"""Wires the signing feature from configuration."""
from __future__ import annotations

from typing import Optional

from core.config.config_service import ConfigService, get_config_service
from core.logging.logic.logger import EventLogger
from .adapters.filesystem_storage_adapter import FileSourceDocument, FilesystemSignedPdfStorage
from .controllers.signing_controller import SigningController
from .logic.field_renderer import FieldRenderer
from .logic.hashing import ContentHasher
from .logic.pdf_signer import PdfSigner
from .logic.signing_pipeline import SigningPipeline
from .repository.audit_repository import AuditRepository


def build_signing_controller(config: Optional[ConfigService] = None) -> SigningController:
    cfg = config or get_config_service()

    storage = FilesystemSignedPdfStorage(cfg.storage.signed_dir, cfg.storage.public_dir)
    audits = AuditRepository(cfg.database.audit)
    hasher = ContentHasher(cfg.signing.hash_algorithm)

    pipeline = SigningPipeline(
        source=FileSourceDocument(cfg.storage.source_pdf),
        storage=storage,
        audit_store=audits,
        signer=PdfSigner(FieldRenderer(signature_opacity=cfg.signing.signature_opacity)),
        hasher=hasher,
        event_log=EventLogger(cfg.database.logging),
        public_url_prefix=cfg.signing.public_url_prefix,
        download_url_prefix=cfg.signing.download_url_prefix,
    )
    return SigningController(
        pipeline=pipeline,
        storage=storage,
        audit_store=audits,
        hasher=hasher,
        recent_limit=cfg.signing.recent_audit_limit,
    )
