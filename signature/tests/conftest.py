"""Shared fixtures for the signature feature tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from signature.adapters.filesystem_storage_adapter import FileSourceDocument, FilesystemSignedPdfStorage
from signature.logic.field_renderer import FieldRenderer
from signature.logic.pdf_signer import PdfSigner
from signature.logic.signing_pipeline import SigningPipeline
from signature.repository.audit_repository import AuditRepository
from signature.tests.factories import FIXED_DATE, make_pdf_bytes


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf_bytes()


@pytest.fixture
def source_pdf(tmp_path: Path, pdf_bytes: bytes) -> Path:
    path = tmp_path / "public" / "sample.pdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def signer() -> PdfSigner:
    return PdfSigner(FieldRenderer(date_text=lambda: FIXED_DATE))


@pytest.fixture
def storage(tmp_path: Path) -> FilesystemSignedPdfStorage:
    return FilesystemSignedPdfStorage(tmp_path / "signed-pdfs", tmp_path / "public")


@pytest.fixture
def audit_repo(tmp_path: Path):
    repo = AuditRepository(tmp_path / "db" / "audit.db")
    yield repo
    repo.close()


@pytest.fixture
def pipeline(source_pdf, storage, audit_repo, signer) -> SigningPipeline:
    return SigningPipeline(
        source=FileSourceDocument(source_pdf),
        storage=storage,
        audit_store=audit_repo,
        signer=signer,
    )
