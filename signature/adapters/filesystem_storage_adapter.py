"""Filesystem implementations of the storage adapters.

Layout:
    <signed_dir>/signed_<ts>.pdf   – durable output, served by the download operation
    <public_dir>/signed_<ts>.pdf   – copy for direct static retrieval
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from ..exceptions.errors import SourceDocumentNotFoundError
from .storage_adapter import SignedPdfStorage, SourceDocument

logger = logging.getLogger(__name__)


class FileSourceDocument(SourceDocument):
    """Base document at a fixed filesystem path."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read_bytes(self) -> bytes:
        if not self.path.is_file():
            raise SourceDocumentNotFoundError(f"Source PDF not found: {self.path.name}")
        return self.path.read_bytes()


class FilesystemSignedPdfStorage(SignedPdfStorage):
    """Local filesystem implementation of SignedPdfStorage."""

    def __init__(self, signed_dir: str | Path, public_dir: str | Path) -> None:
        """
        Args:
            signed_dir: Directory for durable signed output
            public_dir: Directory served to clients as static files
        """
        self._signed = Path(signed_dir)
        self._public = Path(public_dir)
        self._signed.mkdir(parents=True, exist_ok=True)
        self._public.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _is_plain_name(filename: str) -> bool:
        return bool(filename) and Path(filename).name == filename and filename not in (".", "..")

    def save_signed_pdf(self, *, filename: str, data: bytes) -> str:
        if not self._is_plain_name(filename):
            raise ValueError(f"Invalid output file name: {filename!r}")
        dest = self._signed / filename
        tmp = dest.with_suffix(dest.suffix + ".tmp")
        tmp.write_bytes(data)
        tmp.replace(dest)  # atomic on same filesystem
        return str(dest)

    def publish(self, *, filename: str) -> str:
        src = self._signed / filename
        dest = self._public / filename
        shutil.copy2(src, dest)
        return str(dest)

    def resolve(self, filename: str) -> Optional[Path]:
        if not self._is_plain_name(filename):
            return None
        path = self._signed / filename
        return path if path.is_file() else None

    def discard(self, *, filename: str) -> None:
        for folder in (self._signed, self._public):
            path = folder / filename
            if path.exists():
                path.unlink()
                logger.info("Removed %s", path)
