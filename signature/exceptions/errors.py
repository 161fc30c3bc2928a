"""Signature feature exceptions."""
from __future__ import annotations


class SignatureError(Exception):
    """Base exception for the signature feature."""


class InvalidRequestError(SignatureError):
    """Raised when a sign request is malformed; nothing has been touched yet."""


class SourceDocumentNotFoundError(SignatureError):
    """Raised when the base document is missing."""


class SigningFailedError(SignatureError):
    """Raised for any unexpected failure while producing a signed document."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Failed to sign PDF: {details}")
        self.details = details
