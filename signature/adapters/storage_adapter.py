"""Storage adapter abstraction.

Defines the interface for reading the base document and persisting signed
output. Allows switching between local filesystem, S3, Azure Blob, etc.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class SourceDocument(ABC):
    """Read-only handle on the base document every signing run starts from."""

    @abstractmethod
    def read_bytes(self) -> bytes:
        """
        Returns:
            The pristine document content

        Raises:
            SourceDocumentNotFoundError: if the document does not exist
        """
        raise NotImplementedError


class SignedPdfStorage(ABC):
    """Persistence for signed documents."""

    @abstractmethod
    def save_signed_pdf(self, *, filename: str, data: bytes) -> str:
        """
        Persist signed document bytes.

        Args:
            filename: Unique output file name (e.g. "signed_1700000000000.pdf")
            data: Serialized document

        Returns:
            Path/URI to stored file
        """
        raise NotImplementedError

    @abstractmethod
    def publish(self, *, filename: str) -> str:
        """
        Duplicate a stored signed document into the public-serving location.

        Returns:
            Path/URI of the public copy
        """
        raise NotImplementedError

    @abstractmethod
    def resolve(self, filename: str) -> Optional[Path]:
        """
        Locate a stored signed document for download.

        Returns:
            Path to file or None if not found (or the name is not a plain file name)
        """
        raise NotImplementedError

    @abstractmethod
    def discard(self, *, filename: str) -> None:
        """Remove a stored document and its public copy, if present."""
        raise NotImplementedError
